"""Registry – metric definitions, handles, storage and the registry itself."""
from mp_metrics.registry.definition import DEFAULT_BUCKETS, MetricDefinition, MetricKind
from mp_metrics.registry.handles import Counter, Gauge, Histogram
from mp_metrics.registry.registry import ERROR_COUNTER_NAME, Registry
from mp_metrics.registry.store import HistogramSnapshot, MetricSnapshot, MetricStore

__all__ = [
    "DEFAULT_BUCKETS",
    "ERROR_COUNTER_NAME",
    "Counter",
    "Gauge",
    "Histogram",
    "HistogramSnapshot",
    "MetricDefinition",
    "MetricKind",
    "MetricSnapshot",
    "MetricStore",
    "Registry",
]
