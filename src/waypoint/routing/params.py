"""Path parameter parsing and type conversion.

Built-in converters for route path segments like ``{id:int}``.
"""

import re

from waypoint.errors import ConfigurationError

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


def convert_param(value: str, param_type: str) -> str | int | float:
    """Turn a captured segment into the value middleware see in ``request.params``.

    ``compile_path`` only captures text its converter regex accepts, so
    conversion of a matched segment cannot fail; an unknown *param_type*
    raises ``KeyError``.
    """
    return CONVERTERS[param_type][1](value)


def compile_path(path: str, *, prefix: bool = False) -> tuple[re.Pattern[str], dict[str, str]]:
    """Compile a ``/users/{id:int}`` pattern into an anchored regex.

    Returns the regex and a ``{param_name: param_type}`` map. With
    *prefix*, the pattern also matches any path below it, so ``"/"``
    matches everything.

    Examples::

        compile_path("/users/{id:int}")[0].match("/users/42")  # matches
        compile_path("/admin", prefix=True)[0].match("/admin/logs")  # matches
    """
    param_types: dict[str, str] = {}
    parts: list[str] = []
    for segment in path.strip("/").split("/"):
        if not segment:
            continue
        if segment.startswith("<") and segment.endswith(">"):
            msg = f"Route {path!r} uses <param> syntax; use {{param}} instead."
            raise ConfigurationError(msg)
        if segment.startswith("{") and segment.endswith("}"):
            inner = segment[1:-1]
            name, _, param_type = inner.partition(":")
            param_type = param_type or "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route {path!r}"
                raise ConfigurationError(msg)
            pattern, _ = CONVERTERS[param_type]
            param_types[name] = param_type
            parts.append(f"(?P<{name}>{pattern})")
        else:
            parts.append(re.escape(segment))

    body = "/" + "/".join(parts) if parts else ""
    if prefix:
        regex = f"^{body}(?:/.*)?$" if body else "^.*$"
    else:
        regex = f"^{body}/?$" if body else "^/?$"
    return re.compile(regex), param_types
