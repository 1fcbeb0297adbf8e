"""Registry – Counter, Gauge and Histogram handles.

Handles are cheap views: they carry the owning registry and the definition
they were registered with, never a store entry. Every call is routed
through the registry, so a reset or delete issued from one handle is seen
by all copies.
"""
from __future__ import annotations

import contextlib
import time
from typing import TYPE_CHECKING, Iterator, Sequence

from mp_metrics.registry.definition import MetricDefinition, MetricKind

if TYPE_CHECKING:
    from mp_metrics.registry.registry import Registry

LabelValues = Sequence[object]


class _Handle:
    kind: MetricKind

    def __init__(self, registry: "Registry", definition: MetricDefinition) -> None:
        self._registry = registry
        self._definition = definition

    @property
    def name(self) -> str:
        return self._definition.name

    @property
    def definition(self) -> MetricDefinition:
        return self._definition

    @property
    def label_names(self) -> tuple[str, ...]:
        return self._definition.label_names

    def delete(self, label_values: LabelValues = ()) -> bool:
        """Remove the entry for *label_values*; see :meth:`Registry.delete_metric`."""
        return self._registry.delete_metric(self.name, label_values)

    def reset(self) -> bool:
        return self._registry.reset_metric(self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Handle):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._registry is other._registry
            and self._definition == other._definition
        )

    def __hash__(self) -> int:
        return hash((type(self), id(self._registry), self._definition))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, labels={self.label_names!r})"


class Counter(_Handle):
    """Monotonically increasing counter."""

    kind = MetricKind.COUNTER

    def inc(self, value: float = 1.0, label_values: LabelValues = ()) -> None:
        self._registry._apply(self.kind, self.name, "inc", value, label_values)


class Gauge(_Handle):
    """Up/down gauge."""

    kind = MetricKind.GAUGE

    def set(self, value: float, label_values: LabelValues = ()) -> None:
        self._registry._apply(self.kind, self.name, "set", value, label_values)

    def inc(self, value: float = 1.0, label_values: LabelValues = ()) -> None:
        self._registry._apply(self.kind, self.name, "inc", value, label_values)

    def dec(self, value: float = 1.0, label_values: LabelValues = ()) -> None:
        self._registry._apply(self.kind, self.name, "dec", value, label_values)


class Histogram(_Handle):
    """Distribution / latency histogram with cumulative buckets."""

    kind = MetricKind.HISTOGRAM

    @property
    def buckets(self) -> tuple[float, ...]:
        return self._definition.buckets

    def observe(self, value: float, label_values: LabelValues = ()) -> None:
        self._registry._apply(self.kind, self.name, "observe", value, label_values)

    @contextlib.contextmanager
    def time(self, label_values: LabelValues = ()) -> Iterator[None]:
        """Observe the wall-clock seconds spent inside the ``with`` block."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - start, label_values)


__all__ = ["Counter", "Gauge", "Histogram", "LabelValues"]
