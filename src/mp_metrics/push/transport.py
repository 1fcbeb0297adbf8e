"""Push – PushTransport port and the httpx Pushgateway transport."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import httpx

from mp_metrics.exposition.text import CONTENT_TYPE
from mp_metrics.kernel.errors import PushRejectedError, PushTimeoutError, TransportError
from mp_metrics.observability.logging import get_logger

_log = get_logger(__name__)


@runtime_checkable
class PushTransport(Protocol):
    """Port: deliver one rendered payload."""

    async def push(self, payload: str) -> None: ...


class HttpxPushTransport:
    """Send payloads to a Pushgateway with a single async httpx request.

    ``PUT`` replaces every metric of the group, ``POST`` only the metrics
    with the same names. There is no retry; a failed push surfaces as a
    :class:`TransportError` subclass.
    """

    def __init__(self, url: str, timeout: float = 10.0, method: str = "PUT", **kwargs: Any) -> None:
        method = method.upper()
        if method not in ("PUT", "POST"):
            raise ValueError(f"Unsupported push method {method!r}")
        self._url = url
        self._method = method
        self._client = httpx.AsyncClient(timeout=timeout, **kwargs)

    @property
    def url(self) -> str:
        return self._url

    async def __aenter__(self) -> "HttpxPushTransport":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def push(self, payload: str) -> None:
        try:
            response = await self._client.request(
                self._method,
                self._url,
                content=payload.encode("utf-8"),
                headers={"Content-Type": CONTENT_TYPE},
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise PushTimeoutError(self._url, f"Push timed out: {self._method} {self._url}") from exc
        except httpx.HTTPStatusError as exc:
            raise PushRejectedError(
                self._url,
                f"HTTP {exc.response.status_code} from {self._method} {self._url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(self._url, str(exc)) from exc
        _log.debug("payload_pushed", url=self._url, status=response.status_code, bytes=len(payload))


__all__ = ["HttpxPushTransport", "PushTransport"]
