"""Waypoint application class.

Owns the router registry, settings, and host, and exposes the public
surface: middleware registration per verb, ``use``, ``route``, settings
access, request submission (``http_get`` and friends), and ``listen``.
"""

from __future__ import annotations

from typing import Any

from waypoint._internal.types import Callback
from waypoint.config import AppConfig, Settings
from waypoint.dispatch import Dispatcher
from waypoint.errors import InvalidRegistration
from waypoint.http.request import Request
from waypoint.middleware.adapters import is_middleware
from waypoint.navigation.host import Host, MemoryHost
from waypoint.navigation.navigator import Navigator
from waypoint.pipeline import RequestPipeline
from waypoint.routing.registry import RouterRegistry
from waypoint.routing.route import UriPattern
from waypoint.routing.router import Router, split_args

_MISSING: Any = object()


class App:
    """The waypoint application.

    Usage::

        app = App()
        app.use(Spinner())
        app.get("/inbox", render_inbox)
        app.listen(lambda request, response: print("ready"))

        await app.http_get({"uri": "/inbox", "history": HistoryDirective("/inbox")})

    Routers registered first run first. Each ``get``/``post``/... call
    adds its own router, so registration order across calls is the
    order middleware fire in.
    """

    __slots__ = ("config", "dispatcher", "host", "navigator", "pipeline", "registry", "settings")

    def __init__(self, config: AppConfig | None = None, *, host: Host | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.settings = Settings(self.config)
        self.registry = RouterRegistry()
        self.dispatcher = Dispatcher(self.registry)
        self.host: Host = host if host is not None else MemoryHost()
        self.pipeline = RequestPipeline(self.settings, self.registry, self.dispatcher, self.host)
        self.navigator: Navigator | None = None

    # -- Settings --

    def set(self, name: str, value: Any = _MISSING) -> Any:
        """Assign *value* to setting *name*, or return the value of *name*.

        ::

            app.set("http requester", FakeTransport())
            app.set("http requester")
            # => <FakeTransport>
        """
        if value is _MISSING:
            return self.settings.get(name)
        self.settings.set(name, value)
        return self

    # -- Registration --

    def route(self, uri: UriPattern = None) -> Router:
        """Return a new Router for *uri*, registered after existing ones."""
        return self.registry.add(Router(uri))

    def use(self, *args: Any) -> App:
        """Register middleware or a router, optionally under a uri.

        Middleware registered through ``use`` fire for every verb on the
        uri and everything below it; without a uri, on every path.
        A router passed with a uri takes that uri as its base.
        """
        if not args:
            msg = "use takes at least a middleware or a router"
            raise InvalidRegistration(msg)
        which = args[-1]
        if isinstance(which, Router):
            if len(args) > 2:
                msg = f"use takes a router and an optional uri, got {len(args)} arguments"
                raise InvalidRegistration(msg)
            if len(args) == 2:
                which.base_uri = args[0]
            self.registry.add(which)
            return self
        if not is_middleware(which):
            msg = f"use takes at least a middleware or a router, got {type(which).__name__}"
            raise InvalidRegistration(msg)
        self.registry.add(Router().use(*args))
        return self

    def _register(self, verb: str, args: tuple[Any, ...]) -> App:
        uri, middleware = split_args(verb, args)
        router = Router()
        router.add(uri, verb, middleware)
        self.registry.add(router)
        return self

    def get(self, *args: Any) -> Any:
        """Register GET middleware, or read a setting when given one string.

        ::

            app.get("/inbox", render_inbox)
            app.get("http requester")
        """
        if len(args) == 1 and isinstance(args[0], str):
            return self.settings.get(args[0])
        return self._register("GET", args)

    def post(self, *args: Any) -> App:
        return self._register("POST", args)

    def put(self, *args: Any) -> App:
        return self._register("PUT", args)

    def patch(self, *args: Any) -> App:
        return self._register("PATCH", args)

    def delete(self, *args: Any) -> App:
        return self._register("DELETE", args)

    # -- Requests --

    async def request(
        self,
        method: str,
        request: Any,
        on_success: Callback | None = None,
        on_failure: Callback | None = None,
    ) -> None:
        """Submit *request* (uri string, mapping, or Request) with *method*."""
        await self.pipeline.submit(Request.coerce(request, method), on_success, on_failure)

    async def http_get(self, request: Any, on_success: Callback | None = None, on_failure: Callback | None = None) -> None:
        await self.request("GET", request, on_success, on_failure)

    async def http_post(self, request: Any, on_success: Callback | None = None, on_failure: Callback | None = None) -> None:
        await self.request("POST", request, on_success, on_failure)

    async def http_put(self, request: Any, on_success: Callback | None = None, on_failure: Callback | None = None) -> None:
        await self.request("PUT", request, on_success, on_failure)

    async def http_patch(self, request: Any, on_success: Callback | None = None, on_failure: Callback | None = None) -> None:
        await self.request("PATCH", request, on_success, on_failure)

    async def http_delete(self, request: Any, on_success: Callback | None = None, on_failure: Callback | None = None) -> None:
        await self.request("DELETE", request, on_success, on_failure)

    # -- Host lifecycle --

    def listen(self, callback: Callback | None = None) -> Navigator:
        """Follow host load-state, history, and unload signals.

        *callback* runs once, with ``(request, response)``, after the
        updated pass that follows the page becoming interactive.
        Calling ``listen`` again replaces the callback but keeps the
        same navigator and its load state.
        """
        if self.navigator is None:
            self.navigator = Navigator(self.registry, self.dispatcher, self.host, callback)
            self.host.subscribe(self.navigator.handle)
        else:
            self.navigator.on_ready = callback
        return self.navigator
