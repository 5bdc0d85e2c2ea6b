"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hls_cli.models.stats import DownloadStats
from hls_cli.utils.formatting import format_duration, format_size

SUGGESTIONS_MAP = {
    "TransportError": [
        "• A network connection issue occurred.",
        "• Check your internet connection and try again.",
    ],
    "HttpStatusError": [
        "• The server refused the request.",
        "• Playlist links usually expire; copy a fresh one from the page source.",
    ],
    "ManifestParseError": [
        "• The URL does not look like an HLS playlist.",
        "• Use the link from the player's 'data-master' attribute.",
    ],
    "NoSegmentsFoundError": [
        "• The playlist was fetched but lists no video segments.",
        "• Make sure you copied the complete playlist link.",
    ],
    "SegmentDownloadError": [
        "• A segment kept failing after all retries.",
        "• Try again later or raise `--segment-retries`.",
        "• Reduce `--workers` if the server is throttling you.",
    ],
    "FilesystemError": [
        "• Check that the output directory exists and is writable.",
        "• Make sure there is enough free disk space.",
    ],
    "MissingSegmentError": [
        "• Some segments were not saved; the run was aborted.",
        "• Make sure nothing else modifies the temporary directory.",
    ],
    "ConfigurationError": [
        "• Check the values in your configuration file.",
        "• Run `hls-cli init --force` to write a fresh default configuration.",
    ],
}


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions = SUGGESTIONS_MAP.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the effective configuration."""
    console = Console()
    content = ""
    for key, value in sorted(config_data.items()):
        content += f"{key} = {value}\n"

    source = config_path if config_path.is_file() else "built-in defaults"
    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{source}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(stats: DownloadStats, output_path: Path):
    """Displays the final summary of a completed download."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Segments:",
        f"[bold green]{stats.segments_downloaded}/{stats.segments_total}[/bold green]",
    )
    if stats.retries > 0:
        stats_table.add_row("↻ Retries:", f"[yellow]{stats.retries}[/yellow]")

    stats_table.add_row("", "")  # Spacer

    stats_table.add_row(
        "Output Size:", f"[cyan]{format_size(stats.output_size)}[/cyan]"
    )
    stats_table.add_row(
        "Avg. Speed:",
        f"[magenta]{format_size(int(stats.average_speed_bps))}/s[/magenta]",
    )
    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.duration_s)}[/blue]"
    )
    stats_table.add_row("Peak Concurrent:", f"[green]{stats.peak_in_flight}[/green]")
    stats_table.add_row("Output File:", f"[dim]{output_path}[/dim]")

    console.print()
    console.print(
        Panel(
            stats_table,
            title="🎬 [bold]Download Complete![/bold]",
            border_style="green",
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
