"""
Data Models Layer.

This package contains the configuration model, the segment records that flow
through the pipeline and the statistics gathered during a run.
"""

from .config import DownloadConfig
from .segment import DownloadOutcome, SegmentRef
from .stats import DownloadStats

__all__ = ["DownloadConfig", "DownloadOutcome", "DownloadStats", "SegmentRef"]
