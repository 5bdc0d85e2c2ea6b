"""
Concatenates the downloaded segments, in playback order, into the output file.
"""

import logging
import shutil
from pathlib import Path

from hls_cli.exceptions import FilesystemError, MissingSegmentError
from hls_cli.storage.scratch import SEGMENT_EXTENSION

log = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1048576  # 1 MB


class OrderedAssembler:
    """Joins index-named segment files from a scratch directory into one stream."""

    def list_segments(self, scratch_dir: Path) -> list[Path]:
        """Returns the segment files sorted by name, which is playback order."""
        try:
            entries = [
                p
                for p in Path(scratch_dir).iterdir()
                if p.is_file() and p.suffix == SEGMENT_EXTENSION
            ]
        except OSError as e:
            raise FilesystemError(
                f"Could not list segments in '{scratch_dir}': {e}"
            ) from e
        return sorted(entries, key=lambda p: p.name)

    def assemble(
        self,
        scratch_dir: Path,
        output_path: Path,
        expected_count: int | None = None,
    ) -> int:
        """
        Writes every segment of ``scratch_dir`` into ``output_path``.

        The output file is truncated first. When ``expected_count`` is given,
        the scratch directory must contain one segment per index in
        ``[0, expected_count)`` and nothing else.

        Returns:
            The number of bytes written.

        Raises:
            MissingSegmentError: If a segment index is absent.
            FilesystemError: If a segment cannot be read or the output written.
        """
        segments = self.list_segments(scratch_dir)
        if expected_count is not None:
            self._verify_complete(segments, expected_count)

        written = 0
        try:
            with open(output_path, "wb") as output:
                for segment in segments:
                    with open(segment, "rb") as f:
                        shutil.copyfileobj(f, output, COPY_BUFFER_SIZE)
                    written = output.tell()
        except OSError as e:
            raise FilesystemError(f"Could not assemble '{output_path}': {e}") from e

        log.debug(f"Concatenated {len(segments)} segments into {output_path}")
        return written

    @staticmethod
    def _verify_complete(segments: list[Path], expected_count: int) -> None:
        indices = []
        for segment in segments:
            try:
                indices.append(int(segment.stem))
            except ValueError:
                raise MissingSegmentError(
                    f"Unexpected file in scratch area: '{segment.name}'"
                ) from None

        missing = sorted(set(range(expected_count)) - set(indices))
        if missing:
            shown = ", ".join(str(i) for i in missing[:10])
            if len(missing) > 10:
                shown += ", ..."
            raise MissingSegmentError(
                f"{len(missing)} of {expected_count} segments are missing "
                f"(indices {shown})"
            )
        if len(indices) != expected_count:
            raise MissingSegmentError(
                f"Expected {expected_count} segments but found {len(indices)}"
            )
