"""Exposition – Prometheus text serialisation."""
from mp_metrics.exposition.text import (
    CONTENT_TYPE,
    RenderResult,
    escape_label_value,
    format_value,
    render_metric,
    render_text,
)

__all__ = [
    "CONTENT_TYPE",
    "RenderResult",
    "escape_label_value",
    "format_value",
    "render_metric",
    "render_text",
]
