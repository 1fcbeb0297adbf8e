"""Registry – MetricStore and its entry types."""
from __future__ import annotations

import dataclasses
from typing import Callable, TypeVar

from mp_metrics.kernel.labels import LabelKey
from mp_metrics.registry.definition import MetricDefinition


@dataclasses.dataclass
class ScalarEntry:
    """Current value of one counter or gauge label combination."""

    value: float = 0.0


@dataclasses.dataclass
class HistogramEntry:
    """Cumulative bucket counts for one histogram label combination.

    ``buckets[i]`` counts every observation ``<= boundary[i]``; the last slot
    is the ``+Inf`` bucket and always equals ``count``.
    """

    buckets: list[float]
    sum: float = 0.0
    count: float = 0.0

    @classmethod
    def zero(cls, bucket_count: int) -> "HistogramEntry":
        return cls(buckets=[0.0] * (bucket_count + 1))

    def snapshot(self) -> "HistogramSnapshot":
        return HistogramSnapshot(buckets=tuple(self.buckets), sum=self.sum, count=self.count)


@dataclasses.dataclass(frozen=True)
class HistogramSnapshot:
    """Read-only copy of a :class:`HistogramEntry`."""

    buckets: tuple[float, ...]
    sum: float
    count: float


StoreEntry = ScalarEntry | HistogramEntry

SampleValue = float | HistogramSnapshot


@dataclasses.dataclass(frozen=True)
class MetricSnapshot:
    """A definition and copies of its entries, taken under the registry lock."""

    definition: MetricDefinition
    samples: tuple[tuple[LabelKey, SampleValue], ...] = ()


def snapshot_entry(entry: StoreEntry) -> SampleValue:
    if isinstance(entry, HistogramEntry):
        return entry.snapshot()
    return entry.value

E = TypeVar("E", ScalarEntry, HistogramEntry)


class MetricStore:
    """Mapping of ``(metric name, label key)`` to entries.

    Not thread-safe on its own; the owning registry serialises access.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[LabelKey, StoreEntry]] = {}

    def get(self, name: str, key: LabelKey) -> StoreEntry | None:
        return self._entries.get(name, {}).get(key)

    def get_or_create(self, name: str, key: LabelKey, factory: Callable[[], E]) -> E:
        """Return the entry for *key*, creating it with *factory* if absent."""
        bucket = self._entries.setdefault(name, {})
        entry = bucket.get(key)
        if entry is None:
            entry = factory()
            bucket[key] = entry
        return entry  # type: ignore[return-value]

    def delete(self, name: str, key: LabelKey) -> bool:
        bucket = self._entries.get(name)
        if not bucket or key not in bucket:
            return False
        del bucket[key]
        return True

    def delete_all(self, name: str) -> int:
        bucket = self._entries.pop(name, None)
        return len(bucket) if bucket else 0

    def for_each(self, name: str, fn: Callable[[LabelKey, StoreEntry], None]) -> None:
        for key, entry in self.items(name):
            fn(key, entry)

    def items(self, name: str) -> list[tuple[LabelKey, StoreEntry]]:
        """Snapshot of the entries of *name* in insertion order."""
        return list(self._entries.get(name, {}).items())

    def count(self, name: str) -> int:
        return len(self._entries.get(name, {}))

    def names(self) -> list[str]:
        return [name for name, bucket in self._entries.items() if bucket]


__all__ = [
    "HistogramEntry",
    "HistogramSnapshot",
    "MetricSnapshot",
    "MetricStore",
    "SampleValue",
    "ScalarEntry",
    "StoreEntry",
    "snapshot_entry",
]
