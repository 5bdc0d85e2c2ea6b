"""Shared fixtures for the hls-cli test suite.

Mocking strategy:
- ``FakeTransport`` stands in for the aiohttp transport in unit tests. Each
  URL maps to a script of responses (bytes/str for a 200, an ``int`` for a bare
  status, an exception for a connection failure); the last entry repeats.
  It also records every request and the peak number of concurrent requests.
- ``hls_server`` starts a real ``aiohttp.test_utils.TestServer`` for the
  end-to-end pipeline tests.
- Async code is driven with ``asyncio.run`` from plain test functions.
"""

from __future__ import annotations

import contextlib
from asyncio import sleep as _real_sleep
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from hls_cli.exceptions import TransportError
from hls_cli.net.transport import TransportResponse


class FakeTransport:
    def __init__(self, routes: dict[str, Any] | None = None, delays=None) -> None:
        self.routes: dict[str, list[Any]] = {}
        self.delays: dict[str, float] = dict(delays or {})
        self.requests: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        for url, script in (routes or {}).items():
            self.add(url, *(script if isinstance(script, list) else [script]))

    def add(self, url: str, *responses: Any) -> None:
        self.routes[url] = list(responses)

    async def get(self, url: str) -> TransportResponse:
        self.requests.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await _real_sleep(self.delays.get(url, 0))
            script = self.routes.get(url)
            if not script:
                return TransportResponse(url=url, status=404)
            item = script.pop(0) if len(script) > 1 else script[0]
            if isinstance(item, BaseException):
                raise TransportError(url, item)
            if isinstance(item, int):
                return TransportResponse(url=url, status=item)
            if isinstance(item, str):
                item = item.encode()
            return TransportResponse(url=url, status=200, body=item)
        finally:
            self.in_flight -= 1

    def count(self, url: str) -> int:
        return self.requests.count(url)


def no_backoff(attempt: int) -> float:
    return 0


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def recorded_sleeps(monkeypatch) -> list[float]:
    """Replaces ``asyncio.sleep`` so backoff delays are recorded, not waited."""
    sleeps: list[float] = []

    async def fake_sleep(delay, *args, **kwargs):
        sleeps.append(delay)
        await _real_sleep(0)

    monkeypatch.setattr("hls_cli.net.fetcher.asyncio.sleep", fake_sleep)
    return sleeps


@contextlib.asynccontextmanager
async def hls_server(routes: dict[str, Any]):
    """Serves ``routes`` (path -> body or status code) over real HTTP.

    ``routes`` may be filled in after the server has started, which lets a
    playlist embed the server's own URLs.
    """

    async def handle(request: web.Request) -> web.Response:
        body = routes.get(request.path)
        if body is None:
            return web.Response(status=404)
        if isinstance(body, int):
            return web.Response(status=body)
        if isinstance(body, str):
            return web.Response(text=body, content_type="application/vnd.apple.mpegurl")
        return web.Response(body=body, content_type="video/mp2t")

    app = web.Application()
    app.router.add_get("/{tail:.*}", handle)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()
