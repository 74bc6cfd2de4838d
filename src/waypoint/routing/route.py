"""Route descriptor: one (uri, verb, middleware) binding owned by a router."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from waypoint.http.request import Request
from waypoint.middleware.protocol import MiddlewareAdapter
from waypoint.routing.params import compile_path, convert_param

if TYPE_CHECKING:
    from waypoint.routing.router import Router

UriPattern: TypeAlias = str | re.Pattern[str] | None


def join_uri(base: UriPattern, part: UriPattern) -> UriPattern:
    """Combine a router's base uri with a route's own uri.

    A regex on either side wins outright; ``None`` means "unset".
    """
    if isinstance(part, re.Pattern):
        return part
    if part is None:
        return base
    if base is None or isinstance(base, re.Pattern):
        return part
    return base.rstrip("/") + "/" + part.lstrip("/")


def strip_query(uri: str) -> str:
    """Drop the query string and fragment; matching only looks at the path."""
    path = uri.split("#", 1)[0].split("?", 1)[0]
    return path or "/"


@dataclass(slots=True, eq=False)
class Route:
    """A registered binding between a uri pattern, a verb, and middleware.

    ``visited`` holds the request that last activated this route through
    the updated phase, and is cleared when the route is retired by an
    exited pass. The dispatcher is the only writer.

    ``method`` of ``None`` matches every verb. A uri of ``None`` matches
    every path. ``prefix`` routes also match every path below their uri.
    """

    router: Router | None
    uri_part: UriPattern
    method: str | None
    middleware: MiddlewareAdapter
    prefix: bool = False
    visited: Request | None = None
    _compiled: tuple[Any, re.Pattern[str] | None, dict[str, str]] | None = field(
        default=None, repr=False
    )

    @property
    def uri(self) -> UriPattern:
        """Effective pattern: the owning router's base uri joined with ``uri_part``."""
        base = self.router.base_uri if self.router is not None else None
        return join_uri(base, self.uri_part)

    def _pattern(self) -> tuple[re.Pattern[str] | None, dict[str, str]]:
        uri = self.uri
        if self._compiled is not None and self._compiled[0] == uri:
            return self._compiled[1], self._compiled[2]
        if uri is None:
            pattern, types = None, {}
        elif isinstance(uri, re.Pattern):
            pattern, types = uri, {}
        else:
            pattern, types = compile_path(uri, prefix=self.prefix)
        self._compiled = (uri, pattern, types)
        return pattern, types

    def matches(self, uri: str, method: str) -> bool:
        """True if this route is active for *uri* and *method*."""
        if self.method is not None and self.method != method.upper():
            return False
        pattern, _ = self._pattern()
        if pattern is None:
            return True
        return pattern.search(strip_query(uri)) is not None

    def params(self, uri: str) -> dict[str, Any]:
        """Captured and converted path parameters for *uri*.

        Empty when the route has no pattern or does not match.
        """
        pattern, types = self._pattern()
        if pattern is None:
            return {}
        match = pattern.search(strip_query(uri))
        if match is None:
            return {}
        params: dict[str, Any] = {}
        for name, value in match.groupdict().items():
            if value is None:
                continue
            params[name] = convert_param(value, types[name]) if name in types else value
        return params

    def bind(self, request: Request) -> Request:
        """*request* as this route's middleware see it, with its path parameters."""
        params = self.params(request.uri)
        if not params:
            return request
        return request.with_params(params)

    @property
    def is_visited(self) -> bool:
        return self.visited is not None
