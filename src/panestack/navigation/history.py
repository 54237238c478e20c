"""History store capability and an in-memory implementation.

The state machine never talks to a browser directly.  It reads and
writes the persisted view state through a ``HistoryStore``: push creates
a new navigable entry, replace overwrites the current one, and both
broadcast a change notification to subscribers.

``MemoryHistory`` models a browser session history: a list of entries
with a cursor, where push drops any forward entries and ``back()`` /
``forward()`` move the cursor and broadcast ``popstate``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias
from urllib.parse import urljoin, urlsplit

from panestack.navigation.types import Trigger

logger = logging.getLogger("panestack.navigation")


@dataclass(frozen=True, slots=True)
class HistoryEvent:
    """A change notification broadcast by a history store."""

    trigger: Trigger
    record: Any
    url: str


HistoryListener: TypeAlias = Callable[[HistoryEvent], None]


class HistoryStore(Protocol):
    """Protocol for host history stores."""

    @property
    def location(self) -> str:
        """Absolute URL of the current entry."""
        ...

    @property
    def length(self) -> int: ...

    def current(self) -> Any:
        """The raw record stored on the current entry (may be anything)."""
        ...

    def push(self, record: Any, url: str) -> None: ...

    def replace(self, record: Any, url: str, *, trigger: Trigger = Trigger.REPLACESTATE) -> None: ...

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        """Register *listener*; return a function that unregisters it."""
        ...


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    url: str
    record: Any = None


def _copy_record(record: Any) -> Any:
    """Validate that *record* is JSON-serializable and return a detached copy."""
    try:
        return json.loads(json.dumps(record))
    except (TypeError, ValueError) as exc:
        msg = f"History records must be JSON-serializable: {exc}"
        raise TypeError(msg) from exc


class MemoryHistory:
    """In-memory session history.

    Usage::

        history = MemoryHistory("http://localhost/app/users")
        history.push({"id": "a", "views": [...]}, "/app/users/1")
        history.back()  # broadcasts popstate
    """

    __slots__ = ("_entries", "_index", "_listeners")

    def __init__(self, url: str = "http://localhost/", record: Any = None) -> None:
        if "://" not in url:
            msg = f"MemoryHistory needs an absolute initial URL, got {url!r}"
            raise ValueError(msg)
        self._entries: list[HistoryEntry] = [HistoryEntry(url, _copy_record(record))]
        self._index = 0
        self._listeners: list[HistoryListener] = []

    # -- Reading -----------------------------------------------------------

    @property
    def location(self) -> str:
        return self._entries[self._index].url

    @property
    def origin(self) -> str:
        parts = urlsplit(self.location)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def current(self) -> Any:
        return _copy_record(self._entries[self._index].record)

    # -- Writing -----------------------------------------------------------

    def _resolve(self, url: str) -> str:
        # An empty URL keeps the current location
        return urljoin(self.location, url) if url else self.location

    def push(self, record: Any, url: str) -> None:
        entry = HistoryEntry(self._resolve(url), _copy_record(record))
        del self._entries[self._index + 1 :]
        self._entries.append(entry)
        self._index += 1
        self._emit(Trigger.PUSHSTATE, entry)

    def replace(self, record: Any, url: str, *, trigger: Trigger = Trigger.REPLACESTATE) -> None:
        entry = HistoryEntry(self._resolve(url), _copy_record(record))
        self._entries[self._index] = entry
        self._emit(trigger, entry)

    # -- Traversal ---------------------------------------------------------

    def go(self, delta: int) -> bool:
        """Move the cursor by *delta* entries.

        Returns False (and broadcasts nothing) when the move would leave
        the history bounds or *delta* is 0.
        """
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        self._emit(Trigger.POPSTATE, self._entries[target])
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)

    # -- Notifications -----------------------------------------------------

    def subscribe(self, listener: HistoryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, trigger: Trigger, entry: HistoryEntry) -> None:
        event = HistoryEvent(trigger=trigger, record=_copy_record(entry.record), url=entry.url)
        logger.debug("History %s -> %s", trigger, entry.url)
        for listener in list(self._listeners):
            listener(event)
