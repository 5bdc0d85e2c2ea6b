"""Tests for the retrying fetcher and its backoff policy."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeTransport, no_backoff
from hls_cli.exceptions import HttpStatusError, TransportError
from hls_cli.net.fetcher import RetryingFetcher, exponential_backoff
from hls_cli.net.transport import TransportResponse

URL = "http://cdn.example/seg0.ts"


class TestExponentialBackoff:
    def test_doubles_per_attempt(self) -> None:
        policy = exponential_backoff()
        assert [policy(a) for a in range(5)] == [1, 2, 4, 8, 16]

    def test_scales_with_base(self) -> None:
        policy = exponential_backoff(0.5)
        assert [policy(a) for a in range(3)] == [0.5, 1.0, 2.0]

    def test_has_no_cap(self) -> None:
        assert exponential_backoff()(20) == 2**20


class TestTransportResponse:
    @pytest.mark.parametrize("status", [200, 204, 206, 299])
    def test_any_2xx_is_ok(self, status: int) -> None:
        assert TransportResponse(url=URL, status=status).ok

    @pytest.mark.parametrize("status", [199, 301, 404, 500])
    def test_other_statuses_are_not_ok(self, status: int) -> None:
        assert not TransportResponse(url=URL, status=status).ok

    def test_text_uses_charset(self) -> None:
        response = TransportResponse(
            url=URL, status=200, body="café".encode("latin-1"), charset="latin-1"
        )
        assert response.text() == "café"

    def test_text_falls_back_to_utf8_for_unknown_charset(self) -> None:
        response = TransportResponse(
            url=URL, status=200, body="café".encode(), charset="no-such-codec"
        )
        assert response.text() == "café"


class TestRetryingFetcher:
    def test_returns_body_on_first_success(self) -> None:
        transport = FakeTransport({URL: b"payload"})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        assert asyncio.run(fetcher.fetch_bytes(URL)) == b"payload"
        assert transport.count(URL) == 1
        assert fetcher.retry_count == 0

    def test_fetch_text_decodes(self) -> None:
        transport = FakeTransport({URL: "#EXTM3U\n"})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        assert asyncio.run(fetcher.fetch_text(URL)) == "#EXTM3U\n"

    def test_recovers_after_fewer_failures_than_the_ceiling(self) -> None:
        transport = FakeTransport(
            {URL: [500, ConnectionResetError("reset"), 503, b"ok"]}
        )
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        assert asyncio.run(fetcher.fetch_bytes(URL, max_retries=3)) == b"ok"
        assert transport.count(URL) == 4
        assert fetcher.retry_count == 3

    def test_raises_last_status_error_when_exhausted(self) -> None:
        transport = FakeTransport({URL: [500, 502, 404]})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        with pytest.raises(HttpStatusError) as exc_info:
            asyncio.run(fetcher.fetch_bytes(URL, max_retries=2))

        assert exc_info.value.status == 404
        assert transport.count(URL) == 3

    def test_raises_transport_error_when_exhausted(self) -> None:
        transport = FakeTransport({URL: [503, OSError("unreachable")]})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(fetcher.fetch_bytes(URL, max_retries=1))

        assert exc_info.value.url == URL
        assert isinstance(exc_info.value.cause, OSError)

    def test_zero_retries_means_a_single_attempt(self) -> None:
        transport = FakeTransport({URL: 500})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        with pytest.raises(HttpStatusError):
            asyncio.run(fetcher.fetch_bytes(URL, max_retries=0))
        assert transport.count(URL) == 1

    def test_manifest_default_ceiling_is_three_retries(self) -> None:
        transport = FakeTransport({URL: 500})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        with pytest.raises(HttpStatusError):
            asyncio.run(fetcher.fetch_text(URL))
        assert transport.count(URL) == 4

    def test_segment_default_ceiling_is_twelve_retries(self) -> None:
        transport = FakeTransport({URL: 500})
        fetcher = RetryingFetcher(transport, backoff=no_backoff)

        with pytest.raises(HttpStatusError):
            asyncio.run(fetcher.fetch_bytes(URL))
        assert transport.count(URL) == 13


class TestBackoffIsApplied:
    """The computed exponential delay is the one actually awaited.

    An earlier version of this tool logged ``2**attempt`` seconds but always
    slept a fixed 100 ms; these tests pin the corrected behaviour.
    """

    def test_waits_computed_exponential_delays(self, recorded_sleeps) -> None:
        transport = FakeTransport({URL: 500})
        fetcher = RetryingFetcher(transport)

        with pytest.raises(HttpStatusError):
            asyncio.run(fetcher.fetch_bytes(URL, max_retries=4))

        assert recorded_sleeps == [1, 2, 4, 8]

    def test_stops_waiting_once_a_request_succeeds(self, recorded_sleeps) -> None:
        transport = FakeTransport({URL: [500, b"ok"]})
        fetcher = RetryingFetcher(transport, backoff=exponential_backoff(0.25))

        asyncio.run(fetcher.fetch_bytes(URL, max_retries=5))

        assert recorded_sleeps == [0.25]

    def test_custom_policy_receives_zero_based_attempts(self) -> None:
        attempts: list[int] = []

        def policy(attempt: int) -> float:
            attempts.append(attempt)
            return 0

        transport = FakeTransport({URL: [500, 500, 500, b"ok"]})
        fetcher = RetryingFetcher(transport, backoff=policy)

        asyncio.run(fetcher.fetch_bytes(URL, max_retries=5))

        assert attempts == [0, 1, 2]
