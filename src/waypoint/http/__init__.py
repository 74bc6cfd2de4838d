"""HTTP value types: requests, responses, and history entries.

All of them are frozen. Transformers and transports build new values
instead of mutating the ones they receive.
"""

from waypoint.http.request import HistoryDirective, HistoryState, Request
from waypoint.http.response import Response

__all__ = [
    "HistoryDirective",
    "HistoryState",
    "Request",
    "Response",
]
