"""Router: an ordered group of route descriptors sharing a base uri.

Usage::

    router = Router("/users")
    router.get(list_users).post(create_user)
    router.route("/{id:int}").get(show_user).delete(remove_user)
    app.use(router)

Routes are matched in registration order; every matching route is
returned, so several middleware can share one uri.
"""

from __future__ import annotations

from typing import Any

from waypoint.errors import InvalidRegistration
from waypoint.middleware.adapters import adapt, is_middleware
from waypoint.routing.route import Route, UriPattern

HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "PATCH", "DELETE")


def split_args(verb: str, args: tuple[Any, ...]) -> tuple[UriPattern, Any]:
    """Split ``(middleware)`` or ``(uri, middleware)`` registration arguments.

    Raises ``InvalidRegistration`` for an empty call or when the last
    argument is not middleware-shaped.
    """
    if not args:
        msg = f"{verb} takes at least a middleware"
        raise InvalidRegistration(msg)
    if len(args) == 1:
        uri, middleware = None, args[0]
    elif len(args) == 2:
        uri, middleware = args
    else:
        msg = f"{verb} takes a middleware and an optional uri, got {len(args)} arguments"
        raise InvalidRegistration(msg)
    if not is_middleware(middleware):
        msg = f"{verb} takes at least a middleware, got {type(middleware).__name__}"
        raise InvalidRegistration(msg)
    return uri, middleware


class Router:
    """Ordered collection of routes under an optional base uri.

    ``base_uri`` can be reassigned after routes are added (``app.use(uri,
    router)`` does this); route patterns follow it.
    """

    __slots__ = ("_routes", "base_uri")

    def __init__(self, base_uri: UriPattern = None) -> None:
        self.base_uri: UriPattern = base_uri
        self._routes: list[Route] = []

    def __repr__(self) -> str:
        return f"Router(base_uri={self.base_uri!r}, routes={len(self._routes)})"

    # -- Registration --

    def add(self, uri: UriPattern, method: str | None, middleware: Any, *, prefix: bool = False) -> Route:
        """Register one route and return its descriptor."""
        route = Route(
            router=self,
            uri_part=uri,
            method=method.upper() if method else None,
            middleware=adapt(middleware),
            prefix=prefix,
        )
        self._routes.append(route)
        return route

    def use(self, *args: Any) -> Router:
        """Register middleware for every verb on a uri and everything below it."""
        uri, middleware = split_args("use", args)
        self.add(uri, None, middleware, prefix=True)
        return self

    def get(self, *args: Any) -> Router:
        uri, middleware = split_args("get", args)
        self.add(uri, "GET", middleware)
        return self

    def post(self, *args: Any) -> Router:
        uri, middleware = split_args("post", args)
        self.add(uri, "POST", middleware)
        return self

    def put(self, *args: Any) -> Router:
        uri, middleware = split_args("put", args)
        self.add(uri, "PUT", middleware)
        return self

    def patch(self, *args: Any) -> Router:
        uri, middleware = split_args("patch", args)
        self.add(uri, "PATCH", middleware)
        return self

    def delete(self, *args: Any) -> Router:
        uri, middleware = split_args("delete", args)
        self.add(uri, "DELETE", middleware)
        return self

    def route(self, uri: UriPattern) -> BoundRoute:
        """Return a chainable view that registers every verb on *uri*.

        Usage::

            router.route("/items").get(list_items).post(add_item)
        """
        return BoundRoute(self, uri)

    # -- Queries --

    @property
    def routes(self) -> list[Route]:
        """All registered descriptors, in registration order."""
        return list(self._routes)

    def active_matches(self, uri: str, method: str) -> list[Route]:
        """Routes matching *uri* and *method*, in registration order."""
        return [route for route in self._routes if route.matches(uri, method)]

    def visited(self) -> list[Route]:
        """Routes currently holding a visited request."""
        return [route for route in self._routes if route.is_visited]


class BoundRoute:
    """Chainable registration helper returned by ``Router.route(uri)``."""

    __slots__ = ("_router", "_uri")

    def __init__(self, router: Router, uri: UriPattern) -> None:
        self._router = router
        self._uri = uri

    def _register(self, verb: str, method: str | None, middleware: Any) -> BoundRoute:
        if not is_middleware(middleware):
            msg = f"{verb} takes at least a middleware, got {type(middleware).__name__}"
            raise InvalidRegistration(msg)
        self._router.add(self._uri, method, middleware, prefix=method is None)
        return self

    def use(self, middleware: Any) -> BoundRoute:
        return self._register("use", None, middleware)

    def get(self, middleware: Any) -> BoundRoute:
        return self._register("get", "GET", middleware)

    def post(self, middleware: Any) -> BoundRoute:
        return self._register("post", "POST", middleware)

    def put(self, middleware: Any) -> BoundRoute:
        return self._register("put", "PUT", middleware)

    def patch(self, middleware: Any) -> BoundRoute:
        return self._register("patch", "PATCH", middleware)

    def delete(self, middleware: Any) -> BoundRoute:
        return self._register("delete", "DELETE", middleware)
