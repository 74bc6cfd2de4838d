"""Router registry: the ordered set of routers an app dispatches to.

Registration order is the precedence contract. The first router added
is the first whose middleware runs, and within a router its routes run
in the order they were added.
"""

from collections.abc import Iterator

from waypoint.errors import InvalidRegistration
from waypoint.routing.route import Route
from waypoint.routing.router import Router


class RouterRegistry:
    """Ordered collection of routers with flat match aggregation."""

    __slots__ = ("_routers",)

    def __init__(self) -> None:
        self._routers: list[Router] = []

    def add(self, router: Router) -> Router:
        if not isinstance(router, Router):
            msg = f"Expected a Router, got {type(router).__name__}"
            raise InvalidRegistration(msg)
        self._routers.append(router)
        return router

    def __iter__(self) -> Iterator[Router]:
        return iter(self._routers)

    def __len__(self) -> int:
        return len(self._routers)

    @property
    def routes(self) -> list[Route]:
        """Every registered descriptor, in precedence order."""
        return [route for router in self._routers for route in router.routes]

    def active_routes(self, uri: str, method: str) -> list[Route]:
        """Routes matching *uri* and *method* across all routers.

        Concatenated in router order, then match order within each
        router. Duplicates are kept: a path can match a verb-agnostic
        router and a verb-specific one, and both must fire.
        """
        active: list[Route] = []
        for router in self._routers:
            active.extend(router.active_matches(uri, method))
        return active

    def visited_routes(self) -> list[Route]:
        """Routes holding a visited request, independent of any uri."""
        visited: list[Route] = []
        for router in self._routers:
            visited.extend(router.visited())
        return visited
