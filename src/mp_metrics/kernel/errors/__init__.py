"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── MetricsError            (metrics.py)
    │   ├── InvalidNameError
    │   ├── DuplicateMetricError
    │   ├── LabelArityError
    │   ├── LabelKeyError
    │   ├── UnknownMetricError
    │   ├── MetricKindError
    │   └── InvalidValueError
    └── TransportError          (transport.py)
        ├── PushTimeoutError
        └── PushRejectedError

Configuration errors live in :mod:`mp_metrics.config.validation`.
"""

from mp_metrics.kernel.errors.base import BaseError
from mp_metrics.kernel.errors.metrics import (
    DuplicateMetricError,
    InvalidNameError,
    InvalidValueError,
    LabelArityError,
    LabelKeyError,
    MetricKindError,
    MetricsError,
    UnknownMetricError,
)
from mp_metrics.kernel.errors.transport import PushRejectedError, PushTimeoutError, TransportError

__all__ = [
    "BaseError",
    "DuplicateMetricError",
    "InvalidNameError",
    "InvalidValueError",
    "LabelArityError",
    "LabelKeyError",
    "MetricKindError",
    "MetricsError",
    "PushRejectedError",
    "PushTimeoutError",
    "TransportError",
    "UnknownMetricError",
]
