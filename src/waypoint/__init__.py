"""Waypoint: route lifecycle orchestration for single-page apps.

Aggregates matches from independent routers and drives middleware
through entered / updated / failed / exited as pages load, history
pops, and requests are sent.

Basic usage::

    from waypoint import App, Middleware

    class Spinner(Middleware):
        def entered(self, request):
            show_spinner()

        def updated(self, request, response):
            hide_spinner()

    app = App()
    app.use(Spinner())
    app.get("/inbox", lambda request, response, proceed: render(response.payload))
    app.listen()

    await app.http_get("/inbox")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HistoryDirective",
    "HistoryState",
    "InvalidRegistration",
    "MemoryHost",
    "Middleware",
    "Navigator",
    "Phase",
    "Request",
    "Response",
    "Router",
    "Transformer",
    "TransportError",
    "WaypointError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "App":
        from waypoint.app import App

        return App

    if name in ("AppConfig", "Transformer"):
        from waypoint import config as _config

        return getattr(_config, name)

    if name in ("Request", "Response", "HistoryDirective", "HistoryState"):
        from waypoint import http as _http

        return getattr(_http, name)

    if name in ("Middleware", "Phase"):
        from waypoint.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name in ("MemoryHost", "Navigator"):
        from waypoint import navigation as _nav

        return getattr(_nav, name)

    if name in ("WaypointError", "ConfigurationError", "InvalidRegistration", "TransportError"):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
