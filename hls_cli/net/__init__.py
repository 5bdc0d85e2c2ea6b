"""
Network Layer.

This package wraps aiohttp behind a minimal transport and adds bounded
retry with exponential backoff on top of it.
"""

from .fetcher import RetryingFetcher, exponential_backoff
from .transport import Transport, TransportResponse, close_connection_pool

__all__ = [
    "RetryingFetcher",
    "Transport",
    "TransportResponse",
    "close_connection_pool",
    "exponential_backoff",
]
