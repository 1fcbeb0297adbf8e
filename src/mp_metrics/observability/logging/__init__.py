"""Observability – structured logging helpers."""
from mp_metrics.observability.logging.factory import JsonLoggerFactory, configure_logging
from mp_metrics.observability.logging.processors import MetricsErrorProcessor, get_logger

__all__ = [
    "JsonLoggerFactory",
    "MetricsErrorProcessor",
    "configure_logging",
    "get_logger",
]
