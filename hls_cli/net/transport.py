"""
Performs single HTTP GET requests over a shared aiohttp connection pool.
"""

import asyncio
import logging
from dataclasses import dataclass

import aiohttp

from hls_cli.exceptions import TransportError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(
    max_workers: int = 10,
    connect_timeout: float = 15.0,
    read_timeout: float = 90.0,
) -> aiohttp.ClientSession:
    """
    Gets or creates a shared aiohttp ClientSession for downloads.

    This function ensures that only one connection pool is created for the
    lifetime of the application run.

    Args:
        max_workers: Maximum concurrent segment downloads.
        connect_timeout: Seconds allowed to establish a connection.
        read_timeout: Seconds allowed between two reads on the socket.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=max_workers * 2,
            limit_per_host=max_workers,
            ttl_dns_cache=600,
            keepalive_timeout=30,
            enable_cleanup_closed=True,
            force_close=False,
        )
        timeout = aiohttp.ClientTimeout(
            total=None, sock_connect=connect_timeout, sock_read=read_timeout
        )
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug(f"Created download pool with limit_per_host={max_workers}")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the shared global connection pool."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("Shared downloader connection pool closed.")


@dataclass
class TransportResponse:
    """Status and body of a completed HTTP request."""

    url: str
    status: int
    body: bytes = b""
    charset: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        """Decodes the body using the response charset, falling back to UTF-8."""
        try:
            return self.body.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class Transport:
    """Issues plain GET requests and reports connection failures as TransportError."""

    def __init__(
        self,
        max_workers: int = 10,
        connect_timeout: float = 15.0,
        read_timeout: float = 90.0,
    ):
        self.max_workers = max_workers
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    async def get(self, url: str) -> TransportResponse:
        session = await get_connection_pool(
            self.max_workers, self.connect_timeout, self.read_timeout
        )
        try:
            async with session.get(url, allow_redirects=True) as response:
                body = await response.read()
                return TransportResponse(
                    url=url,
                    status=response.status,
                    body=body,
                    charset=response.charset,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(url, e) from e

    async def close(self) -> None:
        await close_connection_pool()
