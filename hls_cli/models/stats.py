"""
Dataclass for tracking download session statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks statistics for a single pipeline run."""

    segments_total: int = 0
    segments_downloaded: int = 0
    bytes_downloaded: int = 0
    retries: int = 0
    output_size: int = 0
    peak_in_flight: int = 0
    _start_time: float = field(default_factory=time.monotonic, repr=False)
    _end_time: float | None = field(default=None, repr=False)

    def record_segment(self, size: int) -> None:
        self.segments_downloaded += 1
        self.bytes_downloaded += size

    def record_in_flight(self, count: int) -> None:
        self.peak_in_flight = max(self.peak_in_flight, count)

    def finish(self) -> None:
        self._end_time = time.monotonic()

    @property
    def duration_s(self) -> float:
        end = self._end_time if self._end_time is not None else time.monotonic()
        return end - self._start_time

    @property
    def average_speed_bps(self) -> float:
        duration = self.duration_s
        return self.bytes_downloaded / duration if duration > 0 else 0.0
