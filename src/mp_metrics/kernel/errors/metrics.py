"""Registry errors – registration mistakes and rejected updates."""

from __future__ import annotations

from typing import Any

from mp_metrics.kernel.errors.base import BaseError


class MetricsError(BaseError):
    """Raised when a metric is declared or updated incorrectly."""

    default_code = "metrics_error"


class InvalidNameError(MetricsError):
    """A metric name, label name or prefix is not a valid identifier."""

    default_code = "invalid_name"

    def __init__(self, name: str, reason: str = "must match [a-zA-Z_][a-zA-Z0-9_]*", **kwargs: Any) -> None:
        super().__init__(f"Invalid name {name!r}: {reason}", **kwargs)
        self.name = name
        self.reason = reason


class DuplicateMetricError(MetricsError):
    """The name is already registered with a different definition."""

    default_code = "duplicate_metric"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Metric '{name}' is already registered with a different definition", **kwargs)
        self.name = name


class LabelArityError(MetricsError):
    """The number of label values does not match the declared label names."""

    default_code = "label_arity"

    def __init__(self, name: str, expected: int, received: int | None, **kwargs: Any) -> None:
        got = "none" if received is None else str(received)
        super().__init__(
            f"Metric '{name}' expects {expected} label value(s), received {got}",
            **kwargs,
        )
        self.name = name
        self.expected = expected
        self.received = received


class LabelKeyError(MetricsError):
    """An encoded label key cannot be decoded."""

    default_code = "label_key"


class UnknownMetricError(MetricsError):
    """An update or delete refers to a name that is not registered."""

    default_code = "unknown_metric"

    def __init__(self, name: str, **kwargs: Any) -> None:
        super().__init__(f"Metric '{name}' is not registered", **kwargs)
        self.name = name


class MetricKindError(MetricsError):
    """The operation does not apply to the registered kind of metric."""

    default_code = "metric_kind"

    def __init__(self, name: str, expected: str, actual: str, **kwargs: Any) -> None:
        super().__init__(f"Metric '{name}' is a {actual}, not a {expected}", **kwargs)
        self.name = name
        self.expected = expected
        self.actual = actual


class InvalidValueError(MetricsError):
    """A value or bucket layout is rejected (negative increment, NaN, ...)."""

    default_code = "invalid_value"


__all__ = [
    "DuplicateMetricError",
    "InvalidNameError",
    "InvalidValueError",
    "LabelArityError",
    "LabelKeyError",
    "MetricKindError",
    "MetricsError",
    "UnknownMetricError",
]
