"""Unit tests for the in-memory testing fakes."""

from __future__ import annotations

import asyncio

import pytest

from mp_metrics.kernel.errors import TransportError
from mp_metrics.push import PushTransport
from mp_metrics.testing import InMemoryPushTransport


class TestInMemoryPushTransport:
    def test_satisfies_port(self) -> None:
        assert isinstance(InMemoryPushTransport(), PushTransport)

    def test_records_payloads_in_order(self) -> None:
        transport = InMemoryPushTransport()
        assert transport.last_payload is None

        asyncio.run(transport.push("a 1\n"))
        asyncio.run(transport.push("a 2\n"))

        assert transport.payloads == ["a 1\n", "a 2\n"]
        assert transport.last_payload == "a 2\n"
        assert transport.attempts == 2

    def test_fail_raises_transport_error(self) -> None:
        transport = InMemoryPushTransport()
        transport.fail("nope")

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(transport.push("a 1\n"))

        assert exc_info.value.message == "nope"
        assert transport.payloads == []
        assert transport.attempts == 1

    def test_fail_with_custom_exception(self) -> None:
        transport = InMemoryPushTransport(fail_with=ConnectionResetError("reset"))
        with pytest.raises(ConnectionResetError):
            asyncio.run(transport.push("a 1\n"))

    def test_reset(self) -> None:
        transport = InMemoryPushTransport()
        asyncio.run(transport.push("a 1\n"))
        transport.fail()
        transport.reset()

        assert transport.payloads == []
        assert transport.attempts == 0
        asyncio.run(transport.push("b 1\n"))
        assert transport.last_payload == "b 1\n"
