"""
Downloads the segments of a playlist with a fixed ceiling on parallel requests.
"""

import asyncio
import logging
from typing import Callable, Sequence

from hls_cli.exceptions import FilesystemError, SegmentDownloadError
from hls_cli.models.config import DEFAULT_MAX_WORKERS, DEFAULT_SEGMENT_RETRIES
from hls_cli.models.segment import DownloadOutcome, SegmentRef
from hls_cli.models.stats import DownloadStats
from hls_cli.net.fetcher import RetryingFetcher
from hls_cli.storage.scratch import ScratchArea

log = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class BoundedDownloadScheduler:
    """
    Runs segment downloads with at most ``concurrency_limit`` in flight.

    The in-flight set and the completion counter are only touched by the
    coroutine running ``download_all``, so no locking is needed. When a
    segment fails for good, no further downloads are submitted, but requests
    already in flight are awaited rather than cancelled so that nothing keeps
    writing into the scratch area after the error is reported.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        scratch: ScratchArea,
        concurrency_limit: int = DEFAULT_MAX_WORKERS,
        max_retries: int = DEFAULT_SEGMENT_RETRIES,
        on_progress: ProgressCallback | None = None,
        stats: DownloadStats | None = None,
    ):
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")
        self.fetcher = fetcher
        self.scratch = scratch
        self.concurrency_limit = concurrency_limit
        self.max_retries = max_retries
        self.on_progress = on_progress
        self.stats = stats
        self.completed = 0

    async def download_all(self, work_list: Sequence[SegmentRef]) -> int:
        """
        Downloads every segment of ``work_list`` into the scratch area.

        Returns:
            The number of segments downloaded.

        Raises:
            SegmentDownloadError: For the first segment that exhausted its retries.
            FilesystemError: If a downloaded segment could not be saved.
        """
        total = len(work_list)
        in_flight: set[asyncio.Task] = set()
        failure: DownloadOutcome | None = None
        self.completed = 0

        for segment in work_list:
            if failure is not None:
                break
            in_flight.add(asyncio.create_task(self._download_segment(segment)))
            if self.stats:
                self.stats.record_in_flight(len(in_flight))

            while len(in_flight) >= self.concurrency_limit and failure is None:
                done, in_flight = await asyncio.wait(
                    in_flight, return_when=asyncio.FIRST_COMPLETED
                )
                failure = self._collect(done, total, failure)

        if failure is not None and in_flight:
            log.debug(f"Waiting for {len(in_flight)} in-flight downloads to finish")

        while in_flight:
            done, in_flight = await asyncio.wait(
                in_flight, return_when=asyncio.FIRST_COMPLETED
            )
            failure = self._collect(done, total, failure)

        if failure is not None:
            log.error(f"[red]Failed to download segment: {failure.error}[/red]")
            if isinstance(failure.error, FilesystemError):
                raise failure.error
            raise SegmentDownloadError(failure.segment, failure.error) from failure.error

        return self.completed

    def _collect(
        self,
        done: set[asyncio.Task],
        total: int,
        failure: DownloadOutcome | None,
    ) -> DownloadOutcome | None:
        """Accounts for finished tasks and returns the first failure seen so far."""
        for task in done:
            outcome: DownloadOutcome = task.result()
            if outcome.succeeded:
                self.completed += 1
                if self.stats:
                    self.stats.record_segment(outcome.size)
                log.debug(f"Downloaded segment {self.completed}/{total}")
                if self.on_progress:
                    self.on_progress(self.completed, total)
            elif failure is None:
                failure = outcome
            else:
                log.debug(
                    f"Segment {outcome.segment.index} also failed: {outcome.error}"
                )
        return failure

    async def _download_segment(self, segment: SegmentRef) -> DownloadOutcome:
        try:
            data = await self.fetcher.fetch_bytes(segment.url, self.max_retries)
            await self.scratch.write_segment(segment.index, data)
        except Exception as e:
            return DownloadOutcome(segment=segment, error=e)
        return DownloadOutcome(segment=segment, size=len(data))
