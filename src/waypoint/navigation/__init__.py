"""Navigation: host signals in, dispatch passes out."""

from waypoint.navigation.host import Host, HistoryEntry, MemoryHost
from waypoint.navigation.navigator import LoadState, Navigator

__all__ = [
    "HistoryEntry",
    "Host",
    "LoadState",
    "MemoryHost",
    "Navigator",
]
