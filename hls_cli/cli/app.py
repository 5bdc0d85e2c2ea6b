"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from hls_cli import __version__
from hls_cli.core.pipeline import DownloadPipeline
from hls_cli.exceptions import HlsCliError
from hls_cli.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_config, print_summary_panel
from .progress_manager import ProgressManager

console = Console()
err_console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("hls_cli")

USAGE_EPILOG = (
    "The playlist link can be found in the page source of the video player, e.g."
    " <video id=\"vgc-player_html5_api\" data-master=\"PLAYLIST_URL\" ... />. The"
    " recommended extension for the output file is .ts.\n\n"
    "Example: hls-cli download \"PLAYLIST_URL\" \"My lesson.ts\""
)

app = typer.Typer(
    name="hls-cli",
    help=(
        "Download a segmented HLS video and join it into a single file. Use"
        " 'hls-cli <command> --help' for more info."
    ),
    epilog=USAGE_EPILOG,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "hls-cli"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """HLS Downloader CLI"""
    if version:
        console.print(f"[bold]hls-cli[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("hls_cli").setLevel(log_level)

    if show_config:
        config_manager = ConfigManager(CONFIG_FILE)
        try:
            config_data = config_manager.get_config_as_dict()
        except HlsCliError as e:
            err_console.print(format_error_with_suggestions(e))
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration file."
    ),
):
    """Write a configuration file with the default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config()
    except HlsCliError as e:
        err_console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="download", epilog=USAGE_EPILOG)
def download_command(
    url: str = typer.Argument(..., help="URL of the HLS playlist (.m3u8)."),
    output: Path = typer.Argument(  # noqa: B008
        ..., help="Path of the video file to create, e.g. 'lesson.ts'."
    ),
    workers: int | None = typer.Option(
        None,
        "-w",
        "--workers",
        help="Number of segments downloaded simultaneously (default 10).",
    ),
    segment_retries: int | None = typer.Option(
        None,
        "--segment-retries",
        help="Retries per segment before the download is abandoned (default 12).",
    ),
    manifest_retries: int | None = typer.Option(
        None,
        "--manifest-retries",
        help="Retries per playlist request (default 3).",
    ),
    backoff_base: float | None = typer.Option(
        None,
        "--backoff-base",
        help="Initial retry delay in seconds, doubled after every failure.",
    ),
    scratch_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--scratch-dir",
        help="Directory in which the temporary segment folder is created.",
    ),
    progress: bool = typer.Option(
        True,
        "--progress/--no-progress",
        help="Show a progress bar instead of one log line per segment.",
    ),
):
    """Download a video from an HLS playlist into a single file."""
    cli_options = {
        key: value
        for key, value in {
            "source_url": url,
            "output_path": str(output),
            "max_workers": workers,
            "segment_retries": segment_retries,
            "manifest_retries": manifest_retries,
            "backoff_base": backoff_base,
            "scratch_dir": str(scratch_dir) if scratch_dir else None,
        }.items()
        if value is not None
    }

    async def _download_async():
        config = ConfigManager(CONFIG_FILE).load_config(cli_options)
        async with ProgressManager(
            console=console, enabled=progress
        ) as progress_manager:
            pipeline = DownloadPipeline(config, progress_manager=progress_manager)
            return await pipeline.run(config.source_url, Path(config.output_path))

    try:
        stats = asyncio.run(_download_async())
    except HlsCliError as e:
        err_console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        raise typer.Exit(code=1) from e

    print_summary_panel(stats, output)
