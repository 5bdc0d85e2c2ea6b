"""
The main orchestrator: resolves the playlist, downloads every segment and
joins them into the output file.
"""

import asyncio
import logging
from pathlib import Path

from hls_cli.cli.progress_manager import ProgressManager
from hls_cli.exceptions import FilesystemError
from hls_cli.models.config import DownloadConfig
from hls_cli.models.stats import DownloadStats
from hls_cli.net.fetcher import (
    BackoffPolicy,
    RetryingFetcher,
    SupportsGet,
    exponential_backoff,
)
from hls_cli.net.transport import Transport
from hls_cli.storage.scratch import ScratchArea

from .assembler import OrderedAssembler
from .manifest import ManifestResolver
from .scheduler import BoundedDownloadScheduler

log = logging.getLogger(__name__)


def touch(path: Path) -> None:
    """Creates the file, or truncates it if it already exists."""
    try:
        with open(path, "wb"):
            pass
    except OSError as e:
        raise FilesystemError(f"Could not create output file '{path}': {e}") from e


class DownloadPipeline:
    """Orchestrates a single playlist download from URL to output file."""

    def __init__(
        self,
        config: DownloadConfig,
        transport: SupportsGet | None = None,
        progress_manager: ProgressManager | None = None,
        backoff: BackoffPolicy | None = None,
    ):
        self.config = config
        self._owns_transport = transport is None
        self.transport = transport or Transport(
            max_workers=config.max_workers,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
        self.fetcher = RetryingFetcher(
            self.transport, backoff or exponential_backoff(config.backoff_base)
        )
        self.resolver = ManifestResolver(self.fetcher, config.manifest_retries)
        self.assembler = OrderedAssembler()
        self.progress_manager = progress_manager
        self.stats = DownloadStats()

    async def run(self, url: str, output_path: str | Path) -> DownloadStats:
        """
        Downloads the stream behind ``url`` into ``output_path``.

        Any error aborts the run: segments are only assembled when all of
        them were downloaded, and the scratch directory is always removed.
        """
        output_path = Path(output_path)
        self.stats = DownloadStats()
        touch(output_path)

        try:
            with ScratchArea(self.config.scratch_dir) as scratch:
                log.info(f"Using temporary directory: [dim]{scratch.path}[/dim]")

                work_list = await self.resolver.resolve(url)
                self.stats.segments_total = len(work_list)
                log.info(f"Found {len(work_list)} video segments")
                scratch.configure(len(work_list))

                if self.progress_manager:
                    self.progress_manager.start(len(work_list))

                scheduler = BoundedDownloadScheduler(
                    self.fetcher,
                    scratch,
                    concurrency_limit=self.config.max_workers,
                    max_retries=self.config.segment_retries,
                    on_progress=self._report_progress,
                    stats=self.stats,
                )
                await scheduler.download_all(work_list)

                self.stats.output_size = await asyncio.to_thread(
                    self.assembler.assemble,
                    scratch.path,
                    output_path,
                    len(work_list),
                )
        finally:
            self.stats.retries = self.fetcher.retry_count
            self.stats.finish()
            if self._owns_transport:
                await self.transport.close()

        log.info(
            "Download completed successfully. Output file:\n"
            f"[bold]{output_path}[/bold]"
        )
        return self.stats

    def _report_progress(self, completed: int, total: int) -> None:
        if self.progress_manager:
            self.progress_manager.update(completed, total)
