"""
Turns a playlist URL into the ordered list of media segments to download.

Only URL lines are inspected: a playlist either lists the segments itself or,
as a master playlist, points at a secondary playlist that does.
"""

import logging

from hls_cli.exceptions import ManifestParseError, NoSegmentsFoundError
from hls_cli.models.config import DEFAULT_MANIFEST_RETRIES
from hls_cli.models.segment import SegmentRef
from hls_cli.net.fetcher import RetryingFetcher

log = logging.getLogger(__name__)

URL_SCHEME_MARKER = "http"
SEGMENT_MARKERS = (".ts", ".bin")


def _lines(content: str) -> list[str]:
    return [line.strip() for line in content.splitlines()]


def is_segment_line(line: str) -> bool:
    return line.startswith(URL_SCHEME_MARKER) and any(
        marker in line for marker in SEGMENT_MARKERS
    )


def contains_direct_segments(content: str) -> bool:
    """Returns True if the playlist lists media segment URLs itself."""
    return any(is_segment_line(line) for line in _lines(content))


def extract_url_lines(content: str) -> list[str]:
    """Returns every URL line of the playlist in file order."""
    return [line for line in _lines(content) if line.startswith(URL_SCHEME_MARKER)]


def find_playlist_reference(content: str) -> str | None:
    """Returns the last URL line of a master playlist, or None if it has none."""
    for line in reversed(_lines(content)):
        if line.startswith(URL_SCHEME_MARKER):
            return line
    return None


class ManifestResolver:
    """Fetches the root playlist and follows it to the segment list."""

    def __init__(
        self, fetcher: RetryingFetcher, max_retries: int = DEFAULT_MANIFEST_RETRIES
    ):
        self.fetcher = fetcher
        self.max_retries = max_retries

    async def resolve(self, root_url: str) -> list[SegmentRef]:
        """
        Resolves ``root_url`` into segments indexed by playback position.

        Raises:
            ManifestParseError: If a master playlist has no playlist URL in it.
            NoSegmentsFoundError: If the resolved playlist has no segment URLs.
            TransportError, HttpStatusError: If a playlist could not be fetched.
        """
        content = await self.fetcher.fetch_text(root_url, self.max_retries)

        if contains_direct_segments(content):
            urls = [line for line in _lines(content) if is_segment_line(line)]
        else:
            reference = find_playlist_reference(content)
            if reference is None:
                raise ManifestParseError(
                    f"No valid playlist URL found in main playlist '{root_url}'"
                )
            log.debug(f"Following secondary playlist: {reference}")
            secondary = await self.fetcher.fetch_text(reference, self.max_retries)
            urls = extract_url_lines(secondary)

        if not urls:
            raise NoSegmentsFoundError("No video segments found in playlist")

        return [SegmentRef(index=i, url=url) for i, url in enumerate(urls)]
