"""Unit tests for PushCycle."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import respx

from mp_metrics.config import PushSettings
from mp_metrics.kernel.errors import PushRejectedError
from mp_metrics.push import HttpxPushTransport, PushCycle, PushResult
from mp_metrics.registry import Counter, Registry
from mp_metrics.testing import InMemoryPushTransport


class TestPrepare:
    def test_init_state_is_passed_to_update(self) -> None:
        registry = Registry()
        seen: list[Any] = []

        def init(reg: Registry) -> Counter:
            return reg.counter("rows_total", "Rows imported")

        def update(rows: Counter) -> None:
            seen.append(rows)
            rows.inc(5)

        payload = PushCycle(registry, InMemoryPushTransport(), init, update).prepare()

        assert isinstance(seen[0], Counter)
        assert "rows_total 5\n" in payload

    def test_without_init_update_receives_registry(self) -> None:
        registry = Registry()
        received: list[Any] = []
        PushCycle(registry, InMemoryPushTransport(), update=received.append).prepare()
        assert received == [registry]

    def test_failing_init_skips_update_and_is_counted(self) -> None:
        registry = Registry()
        calls: list[Any] = []

        def init(reg: Registry) -> None:
            raise RuntimeError("no database")

        payload = PushCycle(registry, InMemoryPushTransport(), init, calls.append).prepare()

        assert calls == []
        assert registry.error_count("callback") == 1
        assert 'metrics_registry_errors_total{reason="callback"} 1\n' in payload

    def test_failing_update_is_counted(self) -> None:
        registry = Registry()

        def update(state: Any) -> None:
            raise KeyError("missing")

        PushCycle(registry, InMemoryPushTransport(), update=update).prepare()
        assert registry.error_count("callback") == 1


class TestRunOnce:
    def test_pushes_rendered_payload(self) -> None:
        registry = Registry()
        registry.gauge("queue_depth").set(3)
        transport = InMemoryPushTransport()

        result = asyncio.run(PushCycle(registry, transport).run_once())

        assert isinstance(result, PushResult)
        assert result.success
        assert result.error is None
        assert transport.last_payload == registry.render_exposition()
        assert result.payload_bytes == len(transport.last_payload.encode("utf-8"))
        assert result.duration_ms >= 0
        assert result.started_at.tzinfo is not None

    def test_transport_failure_is_recorded_not_raised(self) -> None:
        registry = Registry()
        transport = InMemoryPushTransport()
        transport.fail("gateway down")

        result = asyncio.run(PushCycle(registry, transport).run_once())

        assert not result.success
        assert result.error == "gateway down"
        assert registry.error_count("transport_error") == 1

    def test_unexpected_transport_exception_is_recorded(self) -> None:
        registry = Registry()
        transport = InMemoryPushTransport(fail_with=OSError("broken pipe"))

        result = asyncio.run(PushCycle(registry, transport).run_once())

        assert result.error == "broken pipe"
        assert registry.error_count("transport_error") == 1

    def test_failure_shows_up_in_next_payload(self) -> None:
        registry = Registry()
        transport = InMemoryPushTransport()
        cycle = PushCycle(registry, transport)

        transport.fail_with = PushRejectedError("memory://", "HTTP 503", status_code=503)
        asyncio.run(cycle.run_once())
        transport.fail_with = None
        asyncio.run(cycle.run_once())

        assert 'metrics_registry_errors_total{reason="push_rejected"} 1\n' in transport.last_payload

    @respx.mock
    def test_from_settings_builds_httpx_transport(self) -> None:
        route = respx.put("http://gw:9091/metrics/job/importer/instance/a").mock(
            return_value=httpx.Response(200)
        )
        settings = PushSettings(
            gateway_url="http://gw:9091",
            job="importer",
            grouping=["instance=a"],
            timeout_seconds=2.0,
        )
        registry = Registry.from_settings(settings)
        cycle = PushCycle.from_settings(settings, registry)

        assert isinstance(cycle.transport, HttpxPushTransport)
        assert cycle.registry is registry

        result = asyncio.run(cycle.run_once())
        assert result.success
        assert route.called
