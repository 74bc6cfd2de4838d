"""Tagged adapters over the two middleware shapes.

``adapt()`` runs once at registration time, so a bad value fails where it
is registered rather than at the first dispatch. After that, the
dispatcher only ever sees ``HookMiddleware`` or ``FunctionMiddleware``.
"""

import inspect
from dataclasses import dataclass
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint.errors import InvalidRegistration
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import HOOK_NAMES, Middleware, MiddlewareAdapter, Phase


def is_hook_object(value: Any) -> bool:
    """True for a Middleware instance or any object exposing a lifecycle hook."""
    if isinstance(value, Middleware):
        return True
    if inspect.isroutine(value) or isinstance(value, type):
        return False
    return any(callable(getattr(value, name, None)) for name in HOOK_NAMES)


def is_middleware(value: Any) -> bool:
    """True if *value* can be registered as middleware."""
    if isinstance(value, type):
        return False
    return is_hook_object(value) or callable(value)


def describe(value: Any) -> str:
    """Short human-readable name for logs and ``waypoint routes``."""
    name = getattr(value, "name", None)
    if isinstance(name, str) and name:
        return name
    return getattr(value, "__qualname__", None) or type(value).__name__


@dataclass(slots=True)
class HookMiddleware:
    """An object with optional ``entered``/``updated``/``failed``/``exited`` hooks.

    A missing hook means the phase is not this middleware's business: it
    is skipped and the pass continues.
    """

    target: Any

    async def invoke(self, phase: Phase, request: Request, response: Response | None) -> bool:
        hook = getattr(self.target, phase.value, None)
        if not callable(hook):
            return True
        if phase in (Phase.ENTERED, Phase.EXITED):
            await invoke(hook, request)
        else:
            await invoke(hook, request, response)
        predicate = getattr(self.target, "next", None)
        if callable(predicate):
            return bool(await invoke(predicate))
        return True


@dataclass(slots=True)
class FunctionMiddleware:
    """A plain ``(request, response, proceed)`` callable.

    Only participates in the updated and failed phases. The chain halts
    after it unless it calls ``proceed`` before it returns (or, for an
    ``async def``, before its coroutine finishes).
    """

    target: Any

    async def invoke(self, phase: Phase, request: Request, response: Response | None) -> bool:
        if phase not in (Phase.UPDATED, Phase.FAILED):
            return True
        proceeded = False

        def proceed() -> None:
            nonlocal proceeded
            proceeded = True

        await invoke(self.target, request, response, proceed)
        return proceeded


def adapt(value: Any) -> MiddlewareAdapter:
    """Wrap *value* in the adapter matching its shape.

    Raises ``InvalidRegistration`` for anything that is neither a hook
    object nor a callable.
    """
    if isinstance(value, (HookMiddleware, FunctionMiddleware)):
        return value
    if is_hook_object(value):
        return HookMiddleware(value)
    if callable(value) and not isinstance(value, type):
        return FunctionMiddleware(value)
    msg = f"Expected a middleware object or function, got {type(value).__name__}"
    raise InvalidRegistration(msg)
