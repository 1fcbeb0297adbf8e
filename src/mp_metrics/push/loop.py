"""Push – PushLoop: run a PushCycle every N seconds on the event loop."""
from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING, Any

from mp_metrics.observability.logging import configure_logging, get_logger
from mp_metrics.push.cycle import InitCallback, PushCycle, PushResult, UpdateCallback
from mp_metrics.registry import Registry

if TYPE_CHECKING:
    from mp_metrics.config.settings import PushSettings

_log = get_logger(__name__)


class PushLoop:
    """Interval driver for a :class:`PushCycle`.

    Usage::

        loop = PushLoop(cycle, interval_seconds=15)
        stop = asyncio.Event()
        task = asyncio.create_task(loop.run(stop))
        ...
        stop.set()
        await task
    """

    def __init__(self, cycle: PushCycle, interval_seconds: float, history_size: int = 16) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._cycle = cycle
        self._interval = interval_seconds
        self.history: deque[PushResult] = deque(maxlen=history_size)

    @classmethod
    def from_settings(
        cls,
        settings: "PushSettings",
        registry: Registry,
        init: InitCallback | None = None,
        update: UpdateCallback | None = None,
        *,
        setup_logging: bool = False,
        **transport_kwargs: Any,
    ) -> "PushLoop":
        """Build the loop from *settings*.

        With ``setup_logging`` the process log output is configured at
        ``settings.log_level``; leave it off when the host owns logging.
        """
        if setup_logging:
            configure_logging(settings.log_level)
        cycle = PushCycle.from_settings(settings, registry, init=init, update=update, **transport_kwargs)
        return cls(cycle, settings.interval_seconds)

    @property
    def interval_seconds(self) -> float:
        return self._interval

    async def run(self, stop: asyncio.Event | None = None, *, max_cycles: int | None = None) -> None:
        """Push until *stop* is set (or *max_cycles* cycles have run)."""
        stop = stop or asyncio.Event()
        cycles = 0
        _log.info("push_loop_started", interval_seconds=self._interval)
        while not stop.is_set():
            self.history.append(await self._cycle.run_once())
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
        _log.info("push_loop_stopped", cycles=cycles)


__all__ = ["PushLoop"]
