"""Observability – logging for the registry and the push collaborators."""

from mp_metrics.observability.logging import JsonLoggerFactory, configure_logging, get_logger

__all__ = ["JsonLoggerFactory", "configure_logging", "get_logger"]
