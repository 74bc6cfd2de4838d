"""Host environment: location, history, and lifecycle signals.

The navigator never talks to a browser directly. It subscribes to a
``Host`` and receives three kinds of signals:

- ``"readystatechange"`` with the new ready state (``"loading"``,
  ``"interactive"``, ``"complete"``)
- ``"popstate"`` with the state stored in the history entry
- ``"beforeunload"`` with no payload

``MemoryHost`` is an in-process host with a history stack. It is the
default host of an ``App`` and what tests drive.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Protocol

import anyio

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Listener

logger = logging.getLogger("waypoint.navigation")

READY_STATE_CHANGE = "readystatechange"
POP_STATE = "popstate"
BEFORE_UNLOAD = "beforeunload"


class Host(Protocol):
    """What the navigator and pipeline need from the host environment."""

    @property
    def location(self) -> str: ...

    def push_state(self, state: Any, title: str, uri: str) -> None: ...

    def subscribe(self, listener: Listener) -> None: ...


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One entry of the host's session history."""

    uri: str
    title: str = ""
    state: Any = None


class MemoryHost:
    """In-process host with a session history stack.

    Signals are delivered to listeners one at a time: a second signal
    waits until every listener has finished with the first.

    Usage::

        host = MemoryHost("/inbox")
        app = App(host=host)
        app.listen(on_ready)
        await host.set_ready_state("interactive")
        await host.back()
    """

    __slots__ = ("_deliverer", "_delivery", "_entries", "_index", "_listeners", "_pending", "ready_state")

    def __init__(self, location: str = "/", *, ready_state: str = "uninitialized") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(uri=location)]
        self._index = 0
        self._listeners: list[Listener] = []
        self._delivery = anyio.Lock()
        self._deliverer: int | None = None
        self._pending: deque[tuple[str, Any]] = deque()
        self.ready_state = ready_state

    # -- Host protocol --

    @property
    def location(self) -> str:
        return self._entries[self._index].uri

    def push_state(self, state: Any, title: str, uri: str) -> None:
        """Add a history entry after the current one, dropping forward entries."""
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(uri=uri, title=title, state=state))
        self._index += 1
        logger.debug("pushState %r (%d entries)", uri, len(self._entries))

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # -- History inspection --

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def current(self) -> HistoryEntry:
        return self._entries[self._index]

    # -- Signals --

    async def emit(self, signal: str, payload: Any = None) -> None:
        """Deliver *signal* to every listener, in subscription order.

        A signal raised by a listener while another is being delivered
        (an on-ready callback calling ``back()``, say) is queued and
        delivered after the current one, as a browser queues popstate.
        """
        if self._deliverer is not None and self._deliverer == anyio.get_current_task().id:
            self._pending.append((signal, payload))
            return
        async with self._delivery:
            self._deliverer = anyio.get_current_task().id
            self._pending.append((signal, payload))
            try:
                while self._pending:
                    queued, queued_payload = self._pending.popleft()
                    for listener in list(self._listeners):
                        await invoke(listener, queued, queued_payload)
            finally:
                self._deliverer = None
                self._pending.clear()

    async def set_ready_state(self, state: str) -> None:
        self.ready_state = state
        await self.emit(READY_STATE_CHANGE, state)

    async def go(self, delta: int) -> bool:
        """Move *delta* entries through history and fire popstate.

        Returns False (and fires nothing) when the move would leave the
        history stack.
        """
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        await self.emit(POP_STATE, self._entries[target].state)
        return True

    async def back(self) -> bool:
        return await self.go(-1)

    async def forward(self) -> bool:
        return await self.go(1)

    async def unload(self) -> None:
        await self.emit(BEFORE_UNLOAD)
