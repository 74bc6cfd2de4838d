"""Test helpers for waypoint applications."""

from waypoint.testing.middleware import RecordingMiddleware, recorder
from waypoint.testing.transport import FakeTransport, PendingFetch

__all__ = [
    "FakeTransport",
    "PendingFetch",
    "RecordingMiddleware",
    "recorder",
]
