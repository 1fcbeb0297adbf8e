"""Registry – metric definitions, update routing and the built-in error counter.

Registration mistakes raise immediately. Everything that happens after
registration (updates, resets, deletes, rendering) is isolated: a failure is
logged and counted on ``metrics_registry_errors_total{reason="<code>"}`` and
the caller carries on. Updates usually run inside periodic callbacks, and one
bad call must not abort the rest of the cycle.
"""
from __future__ import annotations

import bisect
import math
import numbers
import threading
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from mp_metrics.kernel.errors import (
    DuplicateMetricError,
    InvalidValueError,
    LabelArityError,
    MetricKindError,
    MetricsError,
    UnknownMetricError,
)
from mp_metrics.kernel.labels import EMPTY_LABEL_KEY, LabelKey, encode_label_key
from mp_metrics.observability.logging import get_logger
from mp_metrics.registry.definition import MetricDefinition, MetricKind, validate_prefix
from mp_metrics.registry.handles import Counter, Gauge, Histogram
from mp_metrics.registry.store import (
    HistogramEntry,
    HistogramSnapshot,
    MetricSnapshot,
    MetricStore,
    ScalarEntry,
    snapshot_entry,
)

if TYPE_CHECKING:
    from mp_metrics.config.settings import PushSettings

ERROR_COUNTER_NAME = "metrics_registry_errors_total"
ERROR_COUNTER_HELP = "Failed registry operations, by reason."

_OPERATIONS: dict[MetricKind, frozenset[str]] = {
    MetricKind.COUNTER: frozenset({"inc"}),
    MetricKind.GAUGE: frozenset({"set", "inc", "dec"}),
    MetricKind.HISTOGRAM: frozenset({"observe"}),
}

_OWNER_OF: dict[str, str] = {
    "inc": "counter or gauge",
    "dec": "gauge",
    "set": "gauge",
    "observe": "histogram",
}


class Registry:
    """In-memory metric registry.

    Construct one per application instance and hand it to the code that
    declares and updates metrics; independent registries never share state.

    Usage::

        registry = Registry(prefix="myapp_")
        requests = registry.counter("requests_total", "Requests served", ["host", "status"])
        requests.inc(1, ["a", "200"])
        payload = registry.render_exposition()
    """

    def __init__(self, prefix: str = "", *, logger: Any | None = None) -> None:
        self._prefix = validate_prefix(prefix)
        self._lock = threading.RLock()
        self._definitions: dict[str, MetricDefinition] = {}
        self._store = MetricStore()
        self._log = logger or get_logger(__name__)
        self._register(
            MetricDefinition.create(
                ERROR_COUNTER_NAME,
                MetricKind.COUNTER,
                ERROR_COUNTER_HELP,
                ("reason",),
            )
        )

    @classmethod
    def from_settings(cls, settings: "PushSettings", *, logger: Any | None = None) -> "Registry":
        return cls(prefix=settings.metric_prefix, logger=logger)

    @property
    def prefix(self) -> str:
        return self._prefix

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def counter(self, name: str, description: str = "", label_names: Iterable[str] = ()) -> Counter:
        definition = MetricDefinition.create(name, MetricKind.COUNTER, description, label_names)
        return Counter(self, self._register(definition))

    def gauge(self, name: str, description: str = "", label_names: Iterable[str] = ()) -> Gauge:
        definition = MetricDefinition.create(name, MetricKind.GAUGE, description, label_names)
        return Gauge(self, self._register(definition))

    def histogram(
        self,
        name: str,
        description: str = "",
        label_names: Iterable[str] = (),
        buckets: Sequence[float] | None = None,
    ) -> Histogram:
        definition = MetricDefinition.create(name, MetricKind.HISTOGRAM, description, label_names, buckets)
        return Histogram(self, self._register(definition))

    def _register(self, definition: MetricDefinition) -> MetricDefinition:
        with self._lock:
            existing = self._definitions.get(definition.name)
            if existing is not None:
                if existing != definition:
                    raise DuplicateMetricError(
                        definition.name,
                        detail={"registered": existing.kind.value, "requested": definition.kind.value},
                    )
                return existing
            self._definitions[definition.name] = definition
        self._log.debug("metric_registered", metric=definition.name, kind=definition.kind.value)
        return definition

    def unregister(self, name: str) -> bool:
        """Drop the definition of *name* and all its data."""
        try:
            with self._lock:
                if name == ERROR_COUNTER_NAME:
                    raise MetricsError(f"'{name}' is built in and cannot be unregistered", code="builtin_metric")
                if self._definitions.pop(name, None) is None:
                    raise UnknownMetricError(name)
                self._store.delete_all(name)
        except MetricsError as exc:
            self._record_error(exc, metric=name, op="unregister")
            return False
        self._log.debug("metric_unregistered", metric=name)
        return True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> MetricDefinition | None:
        with self._lock:
            return self._definitions.get(name)

    def definitions(self) -> list[MetricDefinition]:
        """Registered definitions in registration order."""
        with self._lock:
            return list(self._definitions.values())

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._definitions

    def sample(
        self,
        name: str,
        label_values: Sequence[object] | Mapping[str, object] = (),
    ) -> float | HistogramSnapshot | None:
        """Return a copy of the stored value, or ``None`` when there is none.

        Read-only: an unknown name or a wrong label count yields ``None`` and
        is not counted as an error.
        """
        with self._lock:
            definition = self._definitions.get(name)
            if definition is None:
                return None
            try:
                key = self._label_key(definition, label_values)
            except LabelArityError:
                return None
            entry = self._store.get(name, key)
            return None if entry is None else snapshot_entry(entry)

    def error_count(self, reason: str | None = None) -> float:
        """Value of the built-in error counter, for one *reason* or all of them."""
        with self._lock:
            if reason is not None:
                entry = self._store.get(ERROR_COUNTER_NAME, encode_label_key((reason,)))
                return entry.value if isinstance(entry, ScalarEntry) else 0.0
            return sum(
                entry.value
                for _, entry in self._store.items(ERROR_COUNTER_NAME)
                if isinstance(entry, ScalarEntry)
            )

    # ------------------------------------------------------------------
    # Updates (never raise)
    # ------------------------------------------------------------------

    def inc(self, name: str, value: float = 1.0, label_values: Sequence[object] | Mapping[str, object] = ()) -> None:
        self._apply(None, name, "inc", value, label_values)

    def set(self, name: str, value: float, label_values: Sequence[object] | Mapping[str, object] = ()) -> None:
        self._apply(None, name, "set", value, label_values)

    def observe(self, name: str, value: float, label_values: Sequence[object] | Mapping[str, object] = ()) -> None:
        self._apply(None, name, "observe", value, label_values)

    def _apply(
        self,
        expected: MetricKind | None,
        name: str,
        op: str,
        value: Any,
        label_values: Sequence[object] | Mapping[str, object] | None,
    ) -> None:
        try:
            with self._lock:
                definition = self._lookup(name, expected, op)
                key = self._label_key(definition, label_values)
                number = self._coerce(definition, op, value)
                self._mutate(definition, key, op, number)
        except MetricsError as exc:
            self._record_error(exc, metric=name, op=op)
        except Exception as exc:  # noqa: BLE001
            self._record_error(
                MetricsError(f"Unexpected failure during {op} on '{name}'", code="internal", cause=exc),
                metric=name,
                op=op,
            )

    def _lookup(self, name: str, expected: MetricKind | None, op: str) -> MetricDefinition:
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownMetricError(name)
        if expected is not None and definition.kind is not expected:
            raise MetricKindError(name, expected.value, definition.kind.value)
        if op not in _OPERATIONS[definition.kind]:
            raise MetricKindError(name, _OWNER_OF[op], definition.kind.value)
        return definition

    @staticmethod
    def _label_key(
        definition: MetricDefinition,
        label_values: Sequence[object] | Mapping[str, object] | None,
    ) -> LabelKey:
        if label_values is None:
            values: tuple[object, ...] = ()
        elif isinstance(label_values, Mapping):
            if set(label_values) != set(definition.label_names):
                raise LabelArityError(
                    definition.name,
                    definition.arity,
                    len(label_values),
                    detail={"expected": list(definition.label_names), "received": sorted(map(str, label_values))},
                )
            values = tuple(label_values[label] for label in definition.label_names)
        elif isinstance(label_values, str):
            values = (label_values,)
        else:
            values = tuple(label_values)
        if len(values) != definition.arity:
            raise LabelArityError(definition.name, definition.arity, len(values))
        if not values:
            return EMPTY_LABEL_KEY
        return encode_label_key(values)

    @staticmethod
    def _coerce(definition: MetricDefinition, op: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidValueError(
                f"Metric '{definition.name}' takes a number, got {type(value).__name__}",
            )
        number = float(value)
        if definition.kind is MetricKind.COUNTER:
            if not math.isfinite(number):
                raise InvalidValueError(f"Counter '{definition.name}' cannot be incremented by {number}")
            if number < 0:
                raise InvalidValueError(
                    f"Counter '{definition.name}' cannot be incremented by a negative value",
                    detail={"value": number},
                )
        elif definition.kind is MetricKind.HISTOGRAM and not math.isfinite(number):
            raise InvalidValueError(f"Histogram '{definition.name}' cannot observe {number}")
        return number

    def _mutate(self, definition: MetricDefinition, key: LabelKey, op: str, number: float) -> None:
        name = definition.name
        if definition.kind is MetricKind.HISTOGRAM:
            bounds = definition.buckets
            hist = self._store.get_or_create(name, key, lambda: HistogramEntry.zero(len(bounds)))
            # Buckets are inclusive upper bounds; the first bound >= value and
            # every bound after it (plus +Inf) counts the observation.
            for i in range(bisect.bisect_left(bounds, number), len(hist.buckets)):
                hist.buckets[i] += 1
            hist.sum += number
            hist.count += 1
            return

        entry = self._store.get_or_create(name, key, ScalarEntry)
        if op == "set":
            entry.value = number
        elif op == "dec":
            entry.value -= number
        else:
            entry.value += number

    # ------------------------------------------------------------------
    # Reset / delete (never raise)
    # ------------------------------------------------------------------

    def reset_metric(self, name: str) -> bool:
        """Clear every entry of *name* and keep its definition."""
        try:
            with self._lock:
                if name not in self._definitions:
                    raise UnknownMetricError(name)
                removed = self._store.delete_all(name)
        except MetricsError as exc:
            self._record_error(exc, metric=name, op="reset")
            return False
        self._log.debug("metric_reset", metric=name, entries=removed)
        return True

    def delete_metric(
        self,
        name: str,
        label_values: Sequence[object] | Mapping[str, object] | None = None,
    ) -> bool:
        """Remove a single entry of *name*.

        An unlabeled metric drops its only entry. A labeled metric needs
        *label_values*; omitting them is a ``label_arity`` error. Returns
        ``True`` when an entry was removed.
        """
        try:
            with self._lock:
                definition = self._definitions.get(name)
                if definition is None:
                    raise UnknownMetricError(name)
                if definition.arity and label_values is None:
                    raise LabelArityError(name, definition.arity, None)
                key = self._label_key(definition, label_values)
                return self._store.delete(name, key)
        except MetricsError as exc:
            self._record_error(exc, metric=name, op="delete")
            return False

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def collect(self) -> list[MetricSnapshot]:
        """Copy every definition and its entries, in registration order."""
        with self._lock:
            return [
                MetricSnapshot(
                    definition=definition,
                    samples=tuple(
                        (key, snapshot_entry(entry)) for key, entry in self._store.items(definition.name)
                    ),
                )
                for definition in self._definitions.values()
            ]

    def render_exposition(self) -> str:
        """Serialise the registry into the Prometheus text format.

        Never raises. Entries that cannot be rendered are skipped, and the
        error counter is bumped once the pass is complete, so the failures
        show up in the next render.
        """
        from mp_metrics.exposition.text import render_text

        try:
            result = render_text(self.collect(), prefix=self._prefix)
        except Exception as exc:  # noqa: BLE001
            self._record_error(
                MetricsError("Rendering failed", code="render", cause=exc),
                op="render",
            )
            return ""
        for error in result.errors:
            self._record_error(error, op="render")
        return result.text

    # ------------------------------------------------------------------
    # Error accounting
    # ------------------------------------------------------------------

    def record_error(self, reason: str, **context: Any) -> None:
        """Count a failure that happened outside the registry (e.g. a callback)."""
        self._record_error(MetricsError(f"{reason} failure", code=reason), **context)

    def _record_error(self, error: MetricsError, **context: Any) -> None:
        self._log.warning("metrics_operation_failed", error=error, reason=error.code, **context)
        key = encode_label_key((error.code,))
        with self._lock:
            entry = self._store.get_or_create(ERROR_COUNTER_NAME, key, ScalarEntry)
            entry.value += 1


__all__ = ["ERROR_COUNTER_NAME", "Registry"]
