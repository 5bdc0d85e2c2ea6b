"""
Records describing the units of work handled by the download scheduler.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SegmentRef:
    """A media segment URL and its position in playback order."""

    index: int
    url: str


@dataclass
class DownloadOutcome:
    """The result of downloading one segment: success when ``error`` is None."""

    segment: SegmentRef
    size: int = 0
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
