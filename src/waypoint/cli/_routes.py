"""``waypoint routes``: list registered routes in precedence order."""

import argparse
import re
import sys

from waypoint.cli._resolve import resolve_app
from waypoint.middleware.adapters import describe


def format_uri(uri: object) -> str:
    if uri is None:
        return "*"
    if isinstance(uri, re.Pattern):
        return f"re:{uri.pattern}"
    return str(uri)


def run_routes(args: argparse.Namespace) -> None:
    """Print ROUTER, METHOD, URI, and MIDDLEWARE for every route of ``args.app``."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows: list[tuple[str, str, str, str]] = []
    for index, router in enumerate(app.registry):
        for route in router.routes:
            uri = format_uri(route.uri)
            if route.prefix and uri != "*":
                uri = uri.rstrip("/") + "/*"
            rows.append((str(index), route.method or "*", uri, describe(route.middleware.target)))

    if not rows:
        print("No routes registered.")
        return

    headers = ("ROUTER", "METHOD", "URI", "MIDDLEWARE")
    widths = [max(len(headers[i]), *(len(row[i]) for row in rows)) for i in range(3)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 6 + max(len(row[3]) for row in rows), 80))
    for row in rows:
        print(fmt.format(*row))
