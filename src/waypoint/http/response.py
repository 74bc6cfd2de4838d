"""Response produced by a transport or synthesized for navigation events."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """Status line plus payload. Never mutated after creation."""

    status: int = 200
    status_text: str = "OK"
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def ok(cls) -> Response:
        """The 200/"OK" response that navigation events dispatch with."""
        return cls(status=200, status_text="OK")

    @classmethod
    def coerce(cls, value: Any) -> Response:
        if isinstance(value, Response):
            return value
        if value is None:
            return cls.ok()
        if isinstance(value, Mapping):
            return cls(
                status=int(value.get("status", 200)),
                status_text=value.get("status_text", value.get("statusText", "")),
                payload=value.get("payload"),
                headers=value.get("headers") or {},
            )
        msg = f"Cannot build a Response from {type(value).__name__}"
        raise TypeError(msg)

    @property
    def is_success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300
