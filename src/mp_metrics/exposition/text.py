"""Exposition – Prometheus text format (version 0.0.4).

Output for one counter and one histogram::

    # HELP requests_total Requests served
    # TYPE requests_total counter
    requests_total{host="a",status="200"} 2
    # TYPE latency histogram
    latency_bucket{le="0.1"} 1
    latency_bucket{le="+Inf"} 3
    latency_sum 2.35
    latency_count 3
"""
from __future__ import annotations

import dataclasses
import math
from typing import Iterable, Sequence

from mp_metrics.kernel.errors import InvalidValueError, MetricsError
from mp_metrics.kernel.labels import decode_label_key
from mp_metrics.registry.definition import MetricDefinition, MetricKind
from mp_metrics.registry.store import HistogramSnapshot, MetricSnapshot, SampleValue

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


@dataclasses.dataclass(frozen=True)
class RenderResult:
    """Rendered payload plus the entries that had to be skipped."""

    text: str
    errors: tuple[MetricsError, ...] = ()


def format_value(value: float) -> str:
    """Format a sample value or bucket bound the way Prometheus parses it."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    # Shortest repr that round-trips to the stored float.
    return repr(value)


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def format_labels(pairs: Iterable[tuple[str, str]]) -> str:
    rendered = [f'{name}="{escape_label_value(value)}"' for name, value in pairs]
    if not rendered:
        return ""
    return "{" + ",".join(rendered) + "}"


def _scalar_lines(name: str, label_pairs: list[tuple[str, str]], value: SampleValue) -> list[str]:
    if isinstance(value, HistogramSnapshot):
        raise InvalidValueError(f"Scalar metric '{name}' holds histogram data")
    return [f"{name}{format_labels(label_pairs)} {format_value(value)}"]


def _histogram_lines(
    name: str,
    definition: MetricDefinition,
    label_pairs: list[tuple[str, str]],
    value: SampleValue,
) -> list[str]:
    if not isinstance(value, HistogramSnapshot):
        raise InvalidValueError(f"Histogram '{name}' holds scalar data")
    counts = value.buckets
    if len(counts) != len(definition.buckets) + 1:
        raise InvalidValueError(
            f"Histogram '{name}' has {len(counts)} bucket counts for {len(definition.buckets) + 1} buckets",
        )
    for lower, upper in zip(counts, counts[1:]):
        if upper < lower:
            raise InvalidValueError(f"Histogram '{name}' bucket counts are not cumulative")
    if counts[-1] != value.count:
        raise InvalidValueError(f"Histogram '{name}' +Inf bucket does not match its count")

    lines: list[str] = []
    bounds: Sequence[str] = [format_value(b) for b in definition.buckets] + ["+Inf"]
    for bound, count in zip(bounds, counts):
        lines.append(f"{name}_bucket{format_labels([*label_pairs, ('le', bound)])} {format_value(count)}")
    labels = format_labels(label_pairs)
    lines.append(f"{name}_sum{labels} {format_value(value.sum)}")
    lines.append(f"{name}_count{labels} {format_value(value.count)}")
    return lines


def render_metric(snapshot: MetricSnapshot, prefix: str = "") -> RenderResult:
    """Render one metric family; broken entries are skipped and reported."""
    definition = snapshot.definition
    name = prefix + definition.name
    lines: list[str] = []
    errors: list[MetricsError] = []
    if definition.description:
        lines.append(f"# HELP {name} {escape_help(definition.description)}")
    lines.append(f"# TYPE {name} {definition.kind.value}")

    for key, value in snapshot.samples:
        try:
            label_values = decode_label_key(key, definition.arity)
            label_pairs = list(zip(definition.label_names, label_values))
            if definition.kind is MetricKind.HISTOGRAM:
                lines.extend(_histogram_lines(name, definition, label_pairs, value))
            else:
                lines.extend(_scalar_lines(name, label_pairs, value))
        except (MetricsError, TypeError, ValueError) as exc:
            errors.append(
                MetricsError(
                    f"Skipped an entry of '{definition.name}' while rendering",
                    code="render",
                    detail={"metric": definition.name, "key": key},
                    cause=exc,
                )
            )

    return RenderResult(text="".join(f"{line}\n" for line in lines), errors=tuple(errors))


def render_text(snapshots: Iterable[MetricSnapshot], prefix: str = "") -> RenderResult:
    """Render every metric family in order and concatenate the output."""
    parts: list[str] = []
    errors: list[MetricsError] = []
    for snapshot in snapshots:
        result = render_metric(snapshot, prefix)
        parts.append(result.text)
        errors.extend(result.errors)
    return RenderResult(text="".join(parts), errors=tuple(errors))


__all__ = [
    "CONTENT_TYPE",
    "RenderResult",
    "escape_help",
    "escape_label_value",
    "format_labels",
    "format_value",
    "render_metric",
    "render_text",
]
