"""
Core application engine for downloading a segmented stream.

The `DownloadPipeline` acts as the session coordinator: the `ManifestResolver`
produces the ordered segment list, the `BoundedDownloadScheduler` fetches the
segments concurrently and the `OrderedAssembler` joins them in playback order.
"""

from .assembler import OrderedAssembler
from .manifest import ManifestResolver
from .pipeline import DownloadPipeline
from .scheduler import BoundedDownloadScheduler

__all__ = [
    "BoundedDownloadScheduler",
    "DownloadPipeline",
    "ManifestResolver",
    "OrderedAssembler",
]
