"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class MetricsErrorProcessor:
    """structlog processor that expands a ``BaseError`` passed as ``error=``.

    When an event carries ``error=<BaseError>``, the processor replaces it with
    the error's message and adds the rest of :meth:`BaseError.log_fields`
    without overriding keys the caller set. Other values are left untouched.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        from mp_metrics.kernel.errors import BaseError

        error = event_dict.get("error")
        if isinstance(error, BaseError):
            fields = error.log_fields()
            event_dict["error"] = fields.pop("error")
            for key, value in fields.items():
                event_dict.setdefault(key, value)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["MetricsErrorProcessor", "get_logger"]
