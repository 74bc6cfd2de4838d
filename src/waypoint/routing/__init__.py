"""Routing: routers, route descriptors, and the registry that orders them.

Routers are queried in registration order; every matching route fires.
"""

from waypoint.routing.registry import RouterRegistry
from waypoint.routing.route import Route
from waypoint.routing.router import HTTP_METHODS, BoundRoute, Router

__all__ = [
    "HTTP_METHODS",
    "BoundRoute",
    "Route",
    "Router",
    "RouterRegistry",
]
