"""Transport: the collaborator that actually sends a request.

The pipeline only relies on the ``Transport`` protocol::

    async def fetch(request, on_complete, on_error) -> None

``on_complete`` and ``on_error`` both receive ``(request, response)``.
A transport reports failure through ``on_error`` and never raises for
network or status errors. Timeouts and retries are its own business.

``HttpxTransport`` is the default, backed by ``httpx.AsyncClient``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from waypoint._internal.invoke import invoke
from waypoint.config import AppConfig
from waypoint.errors import TransportError
from waypoint.http.request import Request
from waypoint.http.response import Response

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("waypoint.transport")

Completion: TypeAlias = Callable[[Request, Response], None | Awaitable[None]]


class Transport(Protocol):
    """Protocol for request transports."""

    async def fetch(self, request: Request, on_complete: Completion, on_error: Completion) -> None: ...


def _payload(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "json" in content_type and response.content:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class HttpxTransport:
    """Sends requests with ``httpx.AsyncClient``.

    2xx responses complete; any other status, and any ``httpx.HTTPError``,
    is reported through ``on_error``. Network failures and request data
    that cannot be encoded are reported with status ``0`` and the error
    text as status text.

    Pass *client* to reuse a configured client (connection pooling,
    ``httpx.MockTransport`` in tests); otherwise a short-lived client is
    created per request from *config*.
    """

    __slots__ = ("_client", "config")

    def __init__(self, config: AppConfig | None = None, *, client: httpx.AsyncClient | None = None) -> None:
        self.config = config or AppConfig()
        self._client = client

    def _build(self, request: Request) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"headers": dict(request.headers)}
        data = request.data
        if data is None:
            return kwargs
        if isinstance(data, (str, bytes)):
            kwargs["content"] = data
        elif isinstance(data, (Mapping, list)):
            kwargs["json"] = data
        else:
            msg = f"Cannot send request data of type {type(data).__name__}"
            raise TypeError(msg)
        return kwargs

    async def _send(self, client: httpx.AsyncClient, request: Request) -> Response:
        import httpx

        try:
            kwargs = self._build(request)
        except TypeError as exc:
            raise TransportError(request, Response(status=0, status_text=str(exc))) from exc
        try:
            raw = await client.request(request.method, request.uri, **kwargs)
        except httpx.HTTPError as exc:
            failed = Response(status=0, status_text=str(exc) or type(exc).__name__)
            raise TransportError(request, failed) from exc

        response = Response(
            status=raw.status_code,
            status_text=raw.reason_phrase,
            payload=_payload(raw),
            headers=dict(raw.headers),
        )
        if not response.is_success:
            raise TransportError(request, response)
        return response

    async def send(self, request: Request) -> Response:
        """Send *request* and return the response.

        Raises ``TransportError`` for non-2xx statuses, network errors, and
        request data it cannot encode.
        """
        if self._client is not None:
            return await self._send(self._client, request)

        import httpx

        async with httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            follow_redirects=self.config.follow_redirects,
        ) as client:
            return await self._send(client, request)

    async def fetch(self, request: Request, on_complete: Completion, on_error: Completion) -> None:
        try:
            response = await self.send(request)
        except TransportError as exc:
            logger.warning("%s", exc)
            await invoke(on_error, exc.request, exc.response)
            return
        logger.debug("%s %s -> %d", request.method, request.uri, response.status)
        await invoke(on_complete, request, response)

    async def aclose(self) -> None:
        """Close the injected client, if any."""
        if self._client is not None:
            await self._client.aclose()
