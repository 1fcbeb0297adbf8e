"""Push – PushCycle: init, update, render and push once.

A cycle calls the host's ``init(registry)`` to (re)declare metrics, hands the
returned state to ``update(state)``, renders the registry and gives the
payload to a :class:`PushTransport`. Callback and transport failures are
logged and counted on the registry's error counter; ``run_once`` itself
never raises.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable

from mp_metrics.kernel.errors import BaseError
from mp_metrics.observability.logging import get_logger
from mp_metrics.push.transport import HttpxPushTransport, PushTransport
from mp_metrics.registry import Registry

if TYPE_CHECKING:
    from mp_metrics.config.settings import PushSettings

InitCallback = Callable[[Registry], Any]
UpdateCallback = Callable[[Any], None]

_log = get_logger(__name__)


@dataclass(frozen=True)
class PushResult:
    """Outcome of one cycle."""

    started_at: datetime
    duration_ms: float
    payload_bytes: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class PushCycle:
    """Drive one init/update/render/push round against a registry.

    Without an ``init`` callback the registry itself is passed to ``update``.
    When ``init`` fails, ``update`` is skipped for that cycle but the
    registry is still rendered and pushed.
    """

    def __init__(
        self,
        registry: Registry,
        transport: PushTransport,
        init: InitCallback | None = None,
        update: UpdateCallback | None = None,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._init = init
        self._update = update

    @classmethod
    def from_settings(
        cls,
        settings: "PushSettings",
        registry: Registry,
        init: InitCallback | None = None,
        update: UpdateCallback | None = None,
        **transport_kwargs: Any,
    ) -> "PushCycle":
        transport = HttpxPushTransport(
            settings.push_url(),
            timeout=settings.timeout_seconds,
            **transport_kwargs,
        )
        return cls(registry, transport, init=init, update=update)

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def transport(self) -> PushTransport:
        return self._transport

    def prepare(self) -> str:
        """Run the callbacks and render; returns the payload."""
        state: Any = self._registry
        init_ok = True
        if self._init is not None:
            try:
                state = self._init(self._registry)
            except Exception as exc:  # noqa: BLE001
                init_ok = False
                _log.warning("init_callback_failed", error=repr(exc))
                self._registry.record_error("callback", callback="init")
        if self._update is not None and init_ok:
            try:
                self._update(state)
            except Exception as exc:  # noqa: BLE001
                _log.warning("update_callback_failed", error=repr(exc))
                self._registry.record_error("callback", callback="update")
        return self._registry.render_exposition()

    async def run_once(self) -> PushResult:
        started_at = datetime.now(tz=timezone.utc)
        t0 = time.monotonic()
        payload = self.prepare()
        error: str | None = None
        try:
            await self._transport.push(payload)
        except BaseError as exc:
            error = exc.message
            _log.warning("push_failed", error=exc)
            self._registry.record_error(exc.code)
        except Exception as exc:  # noqa: BLE001
            error = str(exc) or type(exc).__name__
            _log.warning("push_failed", error=repr(exc))
            self._registry.record_error("transport_error")
        duration_ms = (time.monotonic() - t0) * 1000
        result = PushResult(
            started_at=started_at,
            duration_ms=duration_ms,
            payload_bytes=len(payload.encode("utf-8")),
            error=error,
        )
        _log.debug(
            "push_cycle_completed",
            success=result.success,
            duration_ms=round(duration_ms, 2),
            payload_bytes=result.payload_bytes,
        )
        return result


__all__ = ["InitCallback", "PushCycle", "PushResult", "UpdateCallback"]
