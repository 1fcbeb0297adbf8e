"""Kernel errors – BaseError, root of every mp-metrics failure.

The ``code`` slug is what the registry counts: an isolated failure shows up as
``metrics_registry_errors_total{reason="<code>"}``. Codes are therefore part
of the public surface and must stay stable.
"""

from __future__ import annotations

from typing import Any, ClassVar


class BaseError(Exception):
    """Failure with a stable ``code`` and optional structured ``detail``.

    ``cause`` is chained as ``__cause__`` so tracebacks show the original
    exception.
    """

    default_code: ClassVar[str] = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def log_fields(self) -> dict[str, Any]:
        """Key-value pairs for a structlog event: ``error``, ``reason``, ``detail``, ``cause``."""
        fields: dict[str, Any] = {"error": self.message, "reason": self.code}
        if self.detail:
            fields["detail"] = self.detail
        if self.cause is not None:
            fields["cause"] = repr(self.cause)
        return fields


__all__ = ["BaseError"]
