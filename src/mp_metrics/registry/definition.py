"""Registry – MetricKind, MetricDefinition and naming rules."""
from __future__ import annotations

import dataclasses
import enum
import math
import re
from typing import Iterable, Sequence

from mp_metrics.kernel.errors import InvalidNameError, InvalidValueError

_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# 19 finite boundaries (5 ms .. 10 s) plus the implicit +Inf bucket.
DEFAULT_BUCKETS: tuple[float, ...] = (
    0.005,
    0.01,
    0.015,
    0.025,
    0.05,
    0.075,
    0.1,
    0.15,
    0.25,
    0.35,
    0.5,
    0.75,
    1.0,
    1.5,
    2.5,
    3.5,
    5.0,
    7.5,
    10.0,
)


class MetricKind(str, enum.Enum):
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


def validate_metric_name(name: str) -> str:
    if not isinstance(name, str) or not _NAME_RE.match(name):
        raise InvalidNameError(str(name))
    return name


def validate_prefix(prefix: str) -> str:
    """A prefix is either empty or itself a valid metric name."""
    if prefix == "":
        return prefix
    if not isinstance(prefix, str) or not _NAME_RE.match(prefix):
        raise InvalidNameError(str(prefix), "prefix must be empty or match [a-zA-Z_][a-zA-Z0-9_]*")
    return prefix


def validate_label_names(label_names: Iterable[str], kind: MetricKind) -> tuple[str, ...]:
    """A bare ``str`` names a single label, matching how label values are taken."""
    names = (label_names,) if isinstance(label_names, str) else tuple(label_names)
    seen: set[str] = set()
    for label in names:
        if not isinstance(label, str) or not _NAME_RE.match(label):
            raise InvalidNameError(str(label), "label names must match [a-zA-Z_][a-zA-Z0-9_]*")
        if label.startswith("__"):
            raise InvalidNameError(label, "label names starting with '__' are reserved")
        if kind is MetricKind.HISTOGRAM and label == "le":
            raise InvalidNameError(label, "'le' is reserved for histogram buckets")
        if label in seen:
            raise InvalidNameError(label, "label names must be unique")
        seen.add(label)
    return names


def normalize_buckets(buckets: Sequence[float] | None) -> tuple[float, ...]:
    """Validate a bucket layout and return it without the implicit ``+Inf``."""
    if buckets is None:
        return DEFAULT_BUCKETS
    try:
        bounds = [float(b) for b in buckets]
    except (TypeError, ValueError) as exc:
        raise InvalidValueError(f"Bucket boundaries must be numbers: {exc}", cause=exc) from exc
    if bounds and bounds[-1] == math.inf:
        bounds.pop()
    if not bounds:
        raise InvalidValueError("A histogram needs at least one finite bucket boundary")
    for b in bounds:
        if not math.isfinite(b):
            raise InvalidValueError(f"Bucket boundary {b!r} is not finite")
    for lower, upper in zip(bounds, bounds[1:]):
        if upper <= lower:
            raise InvalidValueError(
                "Bucket boundaries must be strictly ascending",
                detail={"buckets": bounds},
            )
    return tuple(bounds)


@dataclasses.dataclass(frozen=True)
class MetricDefinition:
    """Immutable declaration of a metric.

    Two definitions are equal when name, kind, description, label names and
    buckets all match; that equality is what makes re-registration idempotent.
    """

    name: str
    kind: MetricKind
    description: str = ""
    label_names: tuple[str, ...] = ()
    buckets: tuple[float, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.label_names)

    @classmethod
    def create(
        cls,
        name: str,
        kind: MetricKind,
        description: str = "",
        label_names: Iterable[str] = (),
        buckets: Sequence[float] | None = None,
    ) -> "MetricDefinition":
        """Validate every field and build a definition; raises on misuse."""
        validate_metric_name(name)
        labels = validate_label_names(label_names, kind)
        bounds: tuple[float, ...] = ()
        if kind is MetricKind.HISTOGRAM:
            bounds = normalize_buckets(buckets)
        elif buckets is not None:
            raise InvalidValueError(f"Only histograms take buckets, '{name}' is a {kind.value}")
        return cls(
            name=name,
            kind=kind,
            description=description or "",
            label_names=labels,
            buckets=bounds,
        )


__all__ = [
    "DEFAULT_BUCKETS",
    "MetricDefinition",
    "MetricKind",
    "normalize_buckets",
    "validate_label_names",
    "validate_metric_name",
    "validate_prefix",
]
