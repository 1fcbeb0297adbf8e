"""Unit tests for HttpxPushTransport."""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from mp_metrics.exposition import CONTENT_TYPE
from mp_metrics.kernel.errors import PushRejectedError, PushTimeoutError, TransportError
from mp_metrics.push import HttpxPushTransport, PushTransport

URL = "http://gw:9091/metrics/job/importer"


class TestHttpxPushTransport:
    def test_satisfies_port(self) -> None:
        assert isinstance(HttpxPushTransport(URL), PushTransport)

    def test_rejects_unsupported_method(self) -> None:
        with pytest.raises(ValueError):
            HttpxPushTransport(URL, method="GET")

    @respx.mock
    def test_put_sends_payload_and_content_type(self) -> None:
        route = respx.put(URL).mock(return_value=httpx.Response(202))

        async def run() -> None:
            async with HttpxPushTransport(URL) as transport:
                await transport.push("jobs_total 1\n")

        asyncio.run(run())
        sent = route.calls.last.request
        assert sent.content == b"jobs_total 1\n"
        assert sent.headers["content-type"] == CONTENT_TYPE

    @respx.mock
    def test_post_method(self) -> None:
        route = respx.post(URL).mock(return_value=httpx.Response(200))

        async def run() -> None:
            transport = HttpxPushTransport(URL, method="post")
            try:
                await transport.push("")
            finally:
                await transport.aclose()

        asyncio.run(run())
        assert route.called

    @respx.mock
    def test_error_status_raises_rejected(self) -> None:
        respx.put(URL).mock(return_value=httpx.Response(500))

        async def run() -> None:
            async with HttpxPushTransport(URL) as transport:
                await transport.push("x 1\n")

        with pytest.raises(PushRejectedError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status_code == 500
        assert exc_info.value.code == "push_rejected"
        assert exc_info.value.url == URL

    @respx.mock
    def test_timeout_raises_push_timeout(self) -> None:
        respx.put(URL).mock(side_effect=httpx.ReadTimeout("slow"))

        async def run() -> None:
            async with HttpxPushTransport(URL, timeout=0.1) as transport:
                await transport.push("x 1\n")

        with pytest.raises(PushTimeoutError):
            asyncio.run(run())

    @respx.mock
    def test_connection_error_raises_transport_error(self) -> None:
        respx.put(URL).mock(side_effect=httpx.ConnectError("refused"))

        async def run() -> None:
            async with HttpxPushTransport(URL) as transport:
                await transport.push("x 1\n")

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(run())
        assert not isinstance(exc_info.value, (PushTimeoutError, PushRejectedError))
        assert exc_info.value.code == "transport_error"
