"""Immutable request issued through the pipeline or synthesized by navigation.

A request is honest about what it is: a method, a URI, and whatever the
caller wants sent along. Transformers rewrite it by building a new one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from waypoint.errors import ConfigurationError

if TYPE_CHECKING:
    from waypoint.http.response import Response


@dataclass(frozen=True, slots=True)
class HistoryDirective:
    """Where to record a completed request in browser history.

    ``uri`` is what the address bar shows, which may differ from the
    request URI (e.g. an API call rendered under ``/view/users``).
    """

    uri: str
    title: str = ""
    state: Any = None


@dataclass(frozen=True, slots=True)
class Request:
    """A request dispatched to middleware and handed to the transport.

    ``params`` holds the path parameters captured by the route a
    middleware was registered on (``{"id": 7}`` for ``/users/{id:int}``).
    The dispatcher fills it per route; it is empty everywhere else.
    """

    method: str
    uri: str
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Any = None
    history: HistoryDirective | None = None
    params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def coerce(cls, value: Any, method: str) -> Request:
        """Build a request for *method* from a URI string, mapping, or Request.

        Usage::

            Request.coerce("/users", "GET")
            Request.coerce({"uri": "/users", "data": {"page": 2}}, "GET")
        """
        method = method.upper()
        if isinstance(value, Request):
            return replace(value, method=method)
        if isinstance(value, str):
            return cls(method=method, uri=value)
        if isinstance(value, Mapping):
            uri = value.get("uri")
            if not isinstance(uri, str):
                msg = f"Request mapping needs a string 'uri', got {uri!r}"
                raise ConfigurationError(msg)
            history = value.get("history")
            if isinstance(history, Mapping):
                history = HistoryDirective(**history)
            return cls(
                method=method,
                uri=uri,
                headers=value.get("headers") or {},
                data=value.get("data"),
                history=history,
            )
        msg = f"Expected a URI string, mapping, or Request, got {type(value).__name__}"
        raise ConfigurationError(msg)

    # -- Chainable transformations --

    def with_uri(self, uri: str) -> Request:
        """Return a new Request with a different URI."""
        return replace(self, uri=uri)

    def with_headers(self, headers: Mapping[str, str]) -> Request:
        """Return a new Request with its headers replaced."""
        return replace(self, headers=headers)

    def with_data(self, data: Any) -> Request:
        """Return a new Request with a different body."""
        return replace(self, data=data)

    def with_params(self, params: Mapping[str, Any]) -> Request:
        """Return a new Request carrying the path parameters of a matched route."""
        return replace(self, params=params)


@dataclass(frozen=True, slots=True)
class HistoryState:
    """The (request, response) pair stored in a history entry.

    Pushed when a request carrying a ``HistoryDirective`` completes and
    handed back by the host when the user navigates to that entry.
    """

    request: Request
    response: Response

    @classmethod
    def coerce(cls, value: Any) -> HistoryState | None:
        """Accept a HistoryState or a ``{"request": ..., "response": ...}`` mapping."""
        if value is None or isinstance(value, HistoryState):
            return value
        if isinstance(value, Mapping):
            from waypoint.http.response import Response

            raw_request = value.get("request")
            raw_response = value.get("response")
            if raw_request is None:
                return None
            method = raw_request.get("method", "GET") if isinstance(raw_request, Mapping) else "GET"
            if isinstance(raw_request, Request):
                method = raw_request.method
            request = Request.coerce(raw_request, method)
            return cls(request=request, response=Response.coerce(raw_response))
        msg = f"Unsupported history state: {type(value).__name__}"
        raise ConfigurationError(msg)
