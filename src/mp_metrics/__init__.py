"""
mp_metrics – in-process metrics registry with Prometheus text exposition.

Import path convention::

    from mp_metrics.registry import Registry
    from mp_metrics.exposition import render_text
    from mp_metrics.push import PushCycle, HttpxPushTransport
    from mp_metrics.kernel.errors import DuplicateMetricError
"""

from mp_metrics.registry import Counter, Gauge, Histogram, Registry

__version__ = "0.1.0"
__all__ = ["Counter", "Gauge", "Histogram", "Registry", "__version__"]
