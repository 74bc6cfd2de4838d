"""Waypoint exception hierarchy.

Shared across the registry, dispatcher, pipeline, and transports so every
module raises and catches the same types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.http.response import Response


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a setting or registration is invalid.

    Raised synchronously at the call site and never recovered from.
    """


class InvalidRegistration(ConfigurationError, TypeError):  # noqa: N818
    """A registration call received neither middleware nor a router."""


class TransportError(WaypointError):
    """A request the transport could not complete.

    Transports raise this internally and convert it into an ``on_error``
    callback. ``App.http_*`` never lets it escape.
    """

    def __init__(self, request: Request, response: Response) -> None:
        self.request = request
        self.response = response
        super().__init__(f"{request.method} {request.uri} failed: {response.status} {response.status_text}")
