"""Middleware: hook objects or plain functions, no inheritance required.

Hook middleware implement any of ``entered(request)``,
``updated(request, response)``, ``failed(request, response)`` and
``exited(request)``, plus an optional ``next()`` predicate.

Function middleware are called as ``fn(request, response, proceed)`` in
the updated and failed phases and stop the chain unless they call
``proceed()``.
"""

from waypoint.middleware.adapters import FunctionMiddleware, HookMiddleware, adapt, is_middleware
from waypoint.middleware.protocol import Middleware, MiddlewareAdapter, MiddlewareFunction, Phase, Proceed

__all__ = [
    "FunctionMiddleware",
    "HookMiddleware",
    "Middleware",
    "MiddlewareAdapter",
    "MiddlewareFunction",
    "Phase",
    "Proceed",
    "adapt",
    "is_middleware",
]
