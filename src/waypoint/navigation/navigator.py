"""Navigation state machine.

Tracks the page-load phase and turns host signals into dispatch passes:

    loading      NOT_LOADED -> LOADED, entered for the current location
    interactive  -> READY (running the LOADED step first if it was
                 skipped), updated with 200/"OK", then the ready callback
    popstate     entered then updated for the popped request; no exited
                 pass, the popped state re-enters a known configuration
    beforeunload exited for every visited route

States only move forward. Repeated signals are ignored, so the ready
callback runs at most once per page lifetime.
"""

import logging
from enum import IntEnum
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Callback
from waypoint.dispatch import Dispatcher
from waypoint.http.request import HistoryState, Request
from waypoint.http.response import Response
from waypoint.navigation.host import BEFORE_UNLOAD, POP_STATE, READY_STATE_CHANGE, Host
from waypoint.routing.registry import RouterRegistry
from waypoint.routing.route import Route

logger = logging.getLogger("waypoint.navigation")


class LoadState(IntEnum):
    """Page-load phase. Ordered: a navigator never moves backwards."""

    NOT_LOADED = 0
    LOADED = 1
    READY = 2


class Navigator:
    """Reacts to host lifecycle signals on behalf of an app."""

    __slots__ = ("dispatcher", "host", "on_ready", "registry", "state")

    def __init__(
        self,
        registry: RouterRegistry,
        dispatcher: Dispatcher,
        host: Host,
        on_ready: Callback | None = None,
    ) -> None:
        self.registry = registry
        self.dispatcher = dispatcher
        self.host = host
        self.state = LoadState.NOT_LOADED
        self.on_ready = on_ready

    def reset(self) -> None:
        """Return to NOT_LOADED, as for a freshly loaded page."""
        self.state = LoadState.NOT_LOADED

    def location_request(self) -> Request:
        """The request a navigation event dispatches with: GET the current location."""
        return Request(method="GET", uri=self.host.location)

    async def handle(self, signal: str, payload: Any = None) -> None:
        """Host listener entry point."""
        if signal == READY_STATE_CHANGE:
            await self.ready_state_changed(payload)
        elif signal == POP_STATE:
            await self.popped(payload)
        elif signal == BEFORE_UNLOAD:
            await self.unloading()
        else:
            logger.debug("Ignoring unknown host signal %r", signal)

    async def ready_state_changed(self, ready_state: str) -> None:
        request = self.location_request()
        routes = self.registry.active_routes(request.uri, request.method)

        if ready_state == "loading":
            if self.state < LoadState.LOADED:
                await self._load(routes, request)
            return

        if ready_state in ("interactive", "complete") and self.state < LoadState.READY:
            if self.state < LoadState.LOADED:
                await self._load(routes, request)
            self.state = LoadState.READY
            response = Response.ok()
            logger.debug("ready at %s", request.uri)
            await self.dispatcher.updated(routes, request, response)
            if self.on_ready is not None:
                await invoke(self.on_ready, request, response)

    async def _load(self, routes: list[Route], request: Request) -> None:
        self.state = LoadState.LOADED
        logger.debug("loaded at %s", request.uri)
        await self.dispatcher.entered(routes, request)

    async def popped(self, state: Any) -> None:
        entry = HistoryState.coerce(state)
        if entry is None:
            return
        request, response = entry.request, entry.response
        routes = self.registry.active_routes(request.uri, request.method)
        logger.debug("popstate %s %s", request.method, request.uri)
        await self.dispatcher.entered(routes, request)
        await self.dispatcher.updated(routes, request, response)

    async def unloading(self) -> None:
        await self.dispatcher.exited()
