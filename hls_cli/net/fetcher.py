"""
Wraps the transport with bounded retry and exponential backoff.

Manifests and segments share the same retry loop but use different ceilings:
a manifest is fetched once, while a video is made of hundreds of segments that
each get a much larger budget before the whole run is abandoned.
"""

import asyncio
import logging
from typing import Callable, Protocol

from hls_cli.exceptions import HlsCliError, HttpStatusError
from hls_cli.models.config import DEFAULT_MANIFEST_RETRIES, DEFAULT_SEGMENT_RETRIES

from .transport import TransportResponse

log = logging.getLogger(__name__)

BackoffPolicy = Callable[[int], float]


class SupportsGet(Protocol):
    async def get(self, url: str) -> TransportResponse: ...


def exponential_backoff(base: float = 1.0) -> BackoffPolicy:
    """
    Returns a policy that waits ``base * 2**attempt`` seconds after the
    0-based failed attempt. There is no jitter and no upper bound.
    """

    def policy(attempt: int) -> float:
        return base * (2**attempt)

    return policy


class RetryingFetcher:
    """Fetches URLs as text or bytes, retrying failed attempts with backoff."""

    def __init__(self, transport: SupportsGet, backoff: BackoffPolicy | None = None):
        self.transport = transport
        self.backoff = backoff or exponential_backoff()
        self.retry_count = 0

    async def fetch_text(
        self, url: str, max_retries: int = DEFAULT_MANIFEST_RETRIES
    ) -> str:
        """Fetches a document such as a playlist and returns its decoded text."""
        response = await self._fetch(url, max_retries, announce_retries=True)
        return response.text()

    async def fetch_bytes(
        self, url: str, max_retries: int = DEFAULT_SEGMENT_RETRIES
    ) -> bytes:
        """Fetches a binary resource such as a media segment."""
        response = await self._fetch(url, max_retries, announce_retries=False)
        return response.body

    async def _fetch(
        self, url: str, max_retries: int, announce_retries: bool
    ) -> TransportResponse:
        """
        Makes up to ``max_retries + 1`` attempts and returns the first 2xx
        response.

        Raises:
            TransportError: If the last attempt failed at the connection level.
            HttpStatusError: If the last attempt returned a non-success status.
        """
        last_error: HlsCliError | None = None
        for attempt in range(max_retries + 1):
            try:
                response = await self.transport.get(url)
                if response.ok:
                    return response
                last_error = HttpStatusError(url, response.status)
            except HlsCliError as e:
                last_error = e

            if attempt < max_retries:
                delay = self.backoff(attempt)
                self.retry_count += 1
                message = (
                    f"Retry {attempt + 1}/{max_retries} in {delay:g}s... "
                    f"({last_error})"
                )
                if announce_retries:
                    log.warning(f"[yellow]{message}[/yellow]")
                else:
                    log.debug(message)
                await asyncio.sleep(delay)

        raise last_error
