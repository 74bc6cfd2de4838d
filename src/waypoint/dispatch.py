"""Middleware lifecycle dispatcher.

Runs one phase over an ordered list of routes. Middleware run strictly
one after another; a middleware that declines to proceed stops the rest
of that pass but has no effect on earlier ones or on later passes.

Bookkeeping:
    - updated marks each reached route as visited with the request.
    - each middleware sees the request carrying its own route's path
      parameters in ``request.params``.
    - exited retires visited routes and clears their visited request.
    - entered and failed never touch visited.

Exceptions raised by middleware propagate to the caller and abort the
remainder of the pass.
"""

import logging
from collections.abc import Sequence

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import Phase
from waypoint.routing.registry import RouterRegistry
from waypoint.routing.route import Route

logger = logging.getLogger("waypoint.dispatch")


class Dispatcher:
    """Invokes route middleware for a lifecycle phase."""

    __slots__ = ("registry",)

    def __init__(self, registry: RouterRegistry) -> None:
        self.registry = registry

    async def dispatch(
        self,
        phase: Phase,
        routes: Sequence[Route] | None,
        request: Request | None = None,
        response: Response | None = None,
    ) -> int:
        """Run *phase* over *routes* and return how many middleware were reached.

        For ``Phase.EXITED``, *routes* may be ``None`` to retire every
        visited route in the registry, and *request* is ignored: each
        route's exited hook receives the request it was visited with.
        """
        phase = Phase(phase)
        if phase is Phase.EXITED:
            return await self._exit(routes)
        if request is None:
            msg = f"{phase} dispatch needs a request"
            raise TypeError(msg)
        if routes is None:
            routes = self.registry.active_routes(request.uri, request.method)

        logger.debug("%s %s %s: %d route(s)", phase, request.method, request.uri, len(routes))
        reached = 0
        for route in routes:
            reached += 1
            routed = route.bind(request)
            if phase is Phase.UPDATED:
                route.visited = routed
            proceed = await route.middleware.invoke(phase, routed, response)
            if not proceed:
                logger.debug("%s pass halted at route %d of %d", phase, reached, len(routes))
                break
        return reached

    async def _exit(self, routes: Sequence[Route] | None) -> int:
        candidates = self.registry.visited_routes() if routes is None else routes
        retiring = [route for route in candidates if route.is_visited]
        logger.debug("exited: %d visited route(s)", len(retiring))
        for route in retiring:
            visited = route.visited
            if visited is None:
                # Retired by a hook earlier in this pass
                continue
            await route.middleware.invoke(Phase.EXITED, visited, None)
            route.visited = None
        return len(retiring)

    # -- Per-phase shorthands --

    async def entered(self, routes: Sequence[Route], request: Request) -> int:
        return await self.dispatch(Phase.ENTERED, routes, request)

    async def updated(self, routes: Sequence[Route], request: Request, response: Response) -> int:
        return await self.dispatch(Phase.UPDATED, routes, request, response)

    async def failed(self, routes: Sequence[Route], request: Request, response: Response) -> int:
        return await self.dispatch(Phase.FAILED, routes, request, response)

    async def exited(self, routes: Sequence[Route] | None = None) -> int:
        return await self.dispatch(Phase.EXITED, routes)
