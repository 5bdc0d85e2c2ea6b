"""
Defines custom exceptions for the application to allow for more specific error handling.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hls_cli.models.segment import SegmentRef


class HlsCliError(Exception):
    """Base exception for all application-specific errors."""


class TransportError(HlsCliError):
    """Raised when an HTTP request fails at the connection or timeout level."""

    def __init__(self, url: str, cause: BaseException):
        self.url = url
        self.cause = cause
        super().__init__(f"Request to '{url}' failed: {cause or type(cause).__name__}")


class HttpStatusError(HlsCliError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, url: str, status: int):
        self.url = url
        self.status = status
        super().__init__(f"HTTP status {status} for '{url}'")


class ManifestParseError(HlsCliError):
    """Raised when a manifest has no URL line where one was required."""


class NoSegmentsFoundError(HlsCliError):
    """Raised when the resolved playlist does not list any video segments."""


class SegmentDownloadError(HlsCliError):
    """Raised when a segment could not be downloaded within its retry budget."""

    def __init__(self, segment: "SegmentRef", cause: BaseException):
        self.segment = segment
        self.cause = cause
        super().__init__(
            f"Failed to download segment {segment.index} ({segment.url}): {cause}"
        )


class FilesystemError(HlsCliError):
    """Raised when the output file or a scratch file cannot be created, read or written."""


class MissingSegmentError(FilesystemError):
    """Raised when the scratch area does not hold a blob for every segment index."""


class ConfigurationError(HlsCliError):
    """Raised for issues related to configuration loading or validation."""
