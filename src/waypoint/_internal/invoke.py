"""Invoke helpers: call sync or async callables uniformly.

Middleware hooks, callbacks, and transformers can be ``def`` or
``async def``. Any code that calls a user-provided callable goes through
this helper so the sync/async check lives in exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(hook, request, response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately
        def entered(request):
            log.append(request.uri)

        # async: coroutine awaited before invoke returns
        async def updated(request, response):
            await render(response.payload)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
