"""
A private, per-run directory where downloaded segments are stored until
they are concatenated into the output file.
"""

import logging
import shutil
import tempfile
from pathlib import Path

import aiofiles

from hls_cli.exceptions import FilesystemError

log = logging.getLogger(__name__)

SEGMENT_EXTENSION = ".ts"
MIN_INDEX_WIDTH = 5


class ScratchArea:
    """
    Owns a temporary directory for exactly one pipeline run.

    Segments are stored under a zero-padded index so that sorting the file
    names gives playback order, independently of the order in which the
    downloads finished. The directory is removed when the context exits.
    """

    def __init__(self, parent: str | Path = "."):
        self.parent = Path(parent)
        self.path: Path | None = None
        self.index_width = MIN_INDEX_WIDTH

    def __enter__(self) -> "ScratchArea":
        try:
            self.parent.mkdir(parents=True, exist_ok=True)
            self.path = Path(tempfile.mkdtemp(prefix=".hls-cli-", dir=self.parent))
        except OSError as e:
            raise FilesystemError(
                f"Could not create a temporary directory in '{self.parent}': {e}"
            ) from e
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
        return False

    def configure(self, total_segments: int) -> None:
        """Widens the index padding when the playlist has more segments than it covers."""
        self.index_width = max(MIN_INDEX_WIDTH, len(str(max(total_segments - 1, 0))))

    def segment_name(self, index: int) -> str:
        return f"{index:0{self.index_width}d}{SEGMENT_EXTENSION}"

    def segment_path(self, index: int) -> Path:
        if self.path is None:
            raise FilesystemError("Scratch area has not been created.")
        return self.path / self.segment_name(index)

    async def write_segment(self, index: int, data: bytes) -> Path:
        """Persists the bytes of one segment under its index-derived name."""
        destination = self.segment_path(index)
        try:
            async with aiofiles.open(destination, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise FilesystemError(
                f"Could not write segment {index} to '{destination}': {e}"
            ) from e
        return destination

    def cleanup(self) -> None:
        if self.path is None:
            return
        shutil.rmtree(self.path, ignore_errors=True)
        log.debug(f"Removed temporary directory {self.path}")
        self.path = None
