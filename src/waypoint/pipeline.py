"""Request pipeline: programmatic requests through the middleware lifecycle.

``submit()`` runs, in order:

1. the ``"http <METHOD> transformer"`` setting, if any, rewriting uri,
   headers, and data
2. an exited pass over every visited route (only one set of routes is
   active at a time, whatever the new uri)
3. a snapshot of the routes matching the rewritten request
4. an entered pass over that snapshot
5. the transport's ``fetch``
6. on completion: a history push when the request asked for one, an
   updated pass over the snapshot, then ``on_success``
7. on error: a failed pass over the snapshot, then ``on_failure``

The snapshot taken in step 3 is what steps 6 and 7 dispatch to, even if
another request or a navigation has changed the active routes since.
Nothing is retried.
"""

import logging
from collections.abc import Mapping
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Callback
from waypoint.config import REQUESTER_KEY, Settings, transformer_key
from waypoint.dispatch import Dispatcher
from waypoint.errors import ConfigurationError
from waypoint.http.request import HistoryState, Request
from waypoint.http.response import Response
from waypoint.navigation.host import Host
from waypoint.routing.registry import RouterRegistry

logger = logging.getLogger("waypoint.pipeline")


def _transformer_field(transformer: Any, name: str) -> Any:
    if isinstance(transformer, Mapping):
        return transformer.get(name)
    return getattr(transformer, name, None)


class RequestPipeline:
    """Drives one request through transform, exit, enter, fetch, and settle."""

    __slots__ = ("dispatcher", "host", "registry", "settings")

    def __init__(
        self,
        settings: Settings,
        registry: RouterRegistry,
        dispatcher: Dispatcher,
        host: Host,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.dispatcher = dispatcher
        self.host = host

    async def transform(self, request: Request) -> Request:
        """Apply the transformer registered for the request's method.

        Each function sees the values rewritten before it, in the order
        uri, headers, data. Missing functions leave their field alone.
        """
        transformer = self.settings.get(transformer_key(request.method))
        if transformer is None:
            return request

        uri, headers, data = request.uri, request.headers, request.data
        rewrite_uri = _transformer_field(transformer, "uri")
        if rewrite_uri is not None:
            uri = await invoke(rewrite_uri, uri=uri, headers=headers, data=data)
        rewrite_headers = _transformer_field(transformer, "headers")
        if rewrite_headers is not None:
            headers = await invoke(rewrite_headers, uri=uri, headers=headers, data=data)
        rewrite_data = _transformer_field(transformer, "data")
        if rewrite_data is not None:
            data = await invoke(rewrite_data, uri=uri, headers=headers, data=data)

        return request.with_uri(uri).with_headers(headers or {}).with_data(data)

    async def submit(
        self,
        request: Request,
        on_success: Callback | None = None,
        on_failure: Callback | None = None,
    ) -> None:
        """Send *request* and dispatch its lifecycle passes.

        Transport failures are reported through the failed pass and
        *on_failure*, never raised. Middleware exceptions propagate.
        """
        transport = self.settings.get(REQUESTER_KEY)
        if transport is None:
            msg = f"No transport configured under {REQUESTER_KEY!r}"
            raise ConfigurationError(msg)

        request = await self.transform(request)

        await self.dispatcher.exited()

        routes = self.registry.active_routes(request.uri, request.method)
        logger.debug("submit %s %s: %d active route(s)", request.method, request.uri, len(routes))

        await self.dispatcher.entered(routes, request)

        async def on_complete(completed: Request, response: Response) -> None:
            history = completed.history
            if history is not None:
                self.host.push_state(
                    HistoryState(request=completed, response=response),
                    history.title,
                    history.uri,
                )
            await self.dispatcher.updated(routes, completed, response)
            if on_success is not None:
                await invoke(on_success, completed, response)

        async def on_error(failed: Request, response: Response) -> None:
            logger.info("%s %s failed: %s %s", failed.method, failed.uri, response.status, response.status_text)
            await self.dispatcher.failed(routes, failed, response)
            if on_failure is not None:
                await invoke(on_failure, failed, response)

        await transport.fetch(request, on_complete, on_error)
