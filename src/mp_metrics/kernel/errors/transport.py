"""Transport errors – failures delivering a payload to the collector."""

from __future__ import annotations

from typing import Any

from mp_metrics.kernel.errors.base import BaseError


class TransportError(BaseError):
    """The payload could not be delivered."""

    default_code = "transport_error"

    def __init__(self, url: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Push to '{url}' failed", **kwargs)
        self.url = url


class PushTimeoutError(TransportError):
    """The push request exceeded its timeout."""

    default_code = "push_timeout"


class PushRejectedError(TransportError):
    """The collector answered with a non-2xx status."""

    default_code = "push_rejected"

    def __init__(
        self,
        url: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(url, message, **kwargs)
        self.status_code = status_code


__all__ = ["PushRejectedError", "PushTimeoutError", "TransportError"]
