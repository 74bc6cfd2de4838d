"""Application configuration.

Two layers:

- ``AppConfig`` is a frozen dataclass for typed, fixed-at-startup options
  (transport base url, timeouts, logging level).
- ``Settings`` is the string-keyed store behind ``app.set()`` / ``app.get()``.
  It holds the transport (``"http requester"``) and per-verb request
  transformers (``"http GET transformer"``), validated on assignment.
"""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from waypoint.errors import ConfigurationError

REQUESTER_KEY = "http requester"
TRANSFORMER_FIELDS = ("uri", "headers", "data")

_TRANSFORMER_KEY = re.compile(r"^http ([A-Za-z]+) transformer$")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(base_url="https://api.example.com", timeout=5.0)
    """

    # Transport
    base_url: str = ""
    timeout: float = 30.0
    follow_redirects: bool = True

    # Diagnostics
    debug: bool = False
    log_level: str = "warning"


def transformer_key(method: str) -> str:
    """Settings key of the transformer for *method*: ``"http GET transformer"``."""
    return f"http {method.upper()} transformer"


@dataclass(frozen=True, slots=True)
class Transformer:
    """Per-verb request rewrite.

    Each field is optional and called with keyword arguments
    ``uri=, headers=, data=`` holding the values rewritten so far.
    """

    uri: Callable[..., Any] | None = None
    headers: Callable[..., Any] | None = None
    data: Callable[..., Any] | None = None


def _query_uri(*, uri: str, headers: Any, data: Any) -> str:
    """Fold mapping *data* into the query string, keeping any ``#fragment``."""
    if not data or not isinstance(data, Mapping):
        return uri
    base, hash_sign, fragment = uri.partition("#")
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{urlencode(data, doseq=True)}{hash_sign}{fragment}"


def _drop_mapping_body(*, uri: str, headers: Any, data: Any) -> Any:
    # Mapping data already travelled in the query string
    if isinstance(data, Mapping):
        return None
    return data


GET_TRANSFORMER = Transformer(uri=_query_uri, data=_drop_mapping_body)


def _setting_key(name: str) -> str:
    # "http post transformer" and "http POST transformer" name the same setting
    match = _TRANSFORMER_KEY.match(name)
    return transformer_key(match.group(1)) if match else name


def _validate_requester(value: Any) -> None:
    if not callable(getattr(value, "fetch", None)):
        msg = f"{REQUESTER_KEY!r} must expose a fetch(request, on_complete, on_error) method"
        raise ConfigurationError(msg)


def _validate_transformer(key: str, value: Any) -> None:
    if value is None:
        return
    fields = [
        value.get(name) if isinstance(value, Mapping) else getattr(value, name, None)
        for name in TRANSFORMER_FIELDS
    ]
    present = [field for field in fields if field is not None]
    if not present or not all(callable(field) for field in present):
        msg = f"{key!r} must provide callable uri, headers, or data functions"
        raise ConfigurationError(msg)


class Settings:
    """String-keyed configuration store with validated well-known keys.

    Usage::

        settings = Settings(AppConfig())
        settings.set("http POST transformer", Transformer(headers=add_csrf))
        settings.get("http POST transformer")
    """

    __slots__ = ("_config", "_values")

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._values: dict[str, Any] = {transformer_key("GET"): GET_TRANSFORMER}

    @property
    def config(self) -> AppConfig:
        return self._config

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value stored under *name*, or *default*."""
        name = _setting_key(name)
        if name == REQUESTER_KEY and name not in self._values:
            # Deferred so httpx is only imported when a request is sent
            from waypoint.transport import HttpxTransport

            self._values[name] = HttpxTransport(self._config)
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Store *value* under *name*, validating well-known keys.

        Raises ``ConfigurationError`` when the transport lacks ``fetch``
        or a transformer has no callable fields.
        """
        if not isinstance(name, str) or not name:
            msg = f"Setting names must be non-empty strings, got {name!r}"
            raise ConfigurationError(msg)
        name = _setting_key(name)
        if name == REQUESTER_KEY:
            _validate_requester(value)
        elif _TRANSFORMER_KEY.match(name):
            _validate_transformer(name, value)
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        if isinstance(name, str):
            name = _setting_key(name)
        return name in self._values or name == REQUESTER_KEY

    def __repr__(self) -> str:
        return f"Settings({sorted(self._values)!r})"


def configure_logging(config: AppConfig) -> None:
    """Apply ``config.log_level`` to the ``waypoint`` logger hierarchy.

    Only the level is set; handlers stay the application's business.
    """
    level = logging.DEBUG if config.debug else getattr(logging, config.log_level.upper(), None)
    if not isinstance(level, int):
        msg = f"Unknown log level {config.log_level!r}"
        raise ConfigurationError(msg)
    logging.getLogger("waypoint").setLevel(level)
