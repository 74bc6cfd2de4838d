"""Middleware shapes and the lifecycle phases they respond to.

A middleware is either an object with optional lifecycle hooks::

    class Spinner(Middleware):
        def entered(self, request): show_spinner()
        def updated(self, request, response): hide_spinner()

or a plain function that decides whether the chain continues::

    def render(request, response, proceed):
        draw(response.payload)
        proceed()

No base class required. The framework checks the shape, not the lineage.
Hooks and functions may be ``def`` or ``async def``.
"""

from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol, TypeAlias

from waypoint.http.request import Request
from waypoint.http.response import Response

# Continuation handed to function middleware
Proceed: TypeAlias = Callable[[], None]

# Function middleware: (request, response, proceed) -> None
MiddlewareFunction: TypeAlias = Callable[[Request, Response, Proceed], None | Awaitable[None]]

HOOK_NAMES = ("entered", "updated", "failed", "exited")


class Phase(StrEnum):
    """Lifecycle phase of a dispatch pass."""

    ENTERED = "entered"
    UPDATED = "updated"
    FAILED = "failed"
    EXITED = "exited"


class Middleware:
    """Optional base class for hook middleware.

    Defines no hooks, so a subclass only responds to the phases it
    implements. ``next()`` decides whether later middleware in the same
    pass run; the default lets them.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name or type(self).__name__

    def next(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class MiddlewareAdapter(Protocol):
    """Uniform invocation contract the dispatcher relies on.

    ``invoke`` returns True when the pass should continue to the next
    route, False to stop it.
    """

    target: Any

    async def invoke(self, phase: Phase, request: Request, response: Response | None) -> bool: ...
