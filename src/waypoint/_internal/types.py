"""Shared type aliases used across waypoint modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Caller callback for http_*: receives (request, response), sync or async
Callback: TypeAlias = Callable[..., Any]

# Host signal listener: receives (signal, payload), sync or async
Listener: TypeAlias = Callable[..., Any]
