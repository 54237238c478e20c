"""Transition tracking with a disappear-prune window.

``TransitionTracker`` keeps the last committed view stack and the
entries of the transition in flight.  Disappearing views stay in the
entries for ``duration`` seconds so the rendering layer can animate them
out, then a timer prunes them.

A navigation arriving inside that window cancels the pending prune and
starts a new window for the new transition (cancel-and-restart).  Each
transition also bumps a generation counter, and a prune callback carrying
an older generation does nothing, so a timer that could not be cancelled
in time never touches a newer transition.
"""

import logging
from collections.abc import Callable, Sequence

from panestack.navigation.types import ViewDef
from panestack.transitions.diff import LifecycleMode, TransitionEntry, diff, views_are_equal
from panestack.transitions.scheduler import Scheduler, TimerHandle

logger = logging.getLogger("panestack.transitions")


class TransitionTracker:
    """Diff successive view stacks and prune disappearing views after a delay.

    Args:
        scheduler: Timer capability used for the prune window.
        duration: Seconds before disappearing views are pruned.  ``0``
            prunes on the next scheduler tick.
        on_settle: Called with the pruned entries once a window closes.
    """

    __slots__ = ("_duration", "_entries", "_generation", "_on_settle", "_pending", "_scheduler", "_views")

    def __init__(
        self,
        scheduler: Scheduler,
        duration: float = 0.3,
        on_settle: Callable[[list[TransitionEntry]], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._duration = duration
        self._on_settle = on_settle
        self._views: tuple[ViewDef, ...] | None = None
        self._entries: list[TransitionEntry] = []
        self._generation = 0
        self._pending: TimerHandle | None = None

    @property
    def entries(self) -> list[TransitionEntry]:
        """Entries of the current transition (copy)."""
        return list(self._entries)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def settling(self) -> bool:
        """True while a prune timer is outstanding."""
        return self._pending is not None

    def update(self, views: Sequence[ViewDef]) -> list[TransitionEntry]:
        """Record a new view stack and return the resulting transition entries.

        A stack structurally equal to the last one leaves the transition
        untouched.
        """
        if self._views is not None and views_are_equal(views, self._views):
            return self.entries

        previous = self._views
        self._views = tuple(views)
        self._entries = diff(self._views, previous)
        self._generation += 1
        self._cancel_pending()

        if any(entry.mode is LifecycleMode.DISAPPEAR for entry in self._entries):
            generation = self._generation
            self._pending = self._scheduler.call_later(
                self._duration, lambda: self._prune(generation)
            )
            logger.debug(
                "Transition %d scheduled prune in %.3fs", generation, self._duration
            )
        return self.entries

    def cancel(self) -> None:
        """Drop any pending prune without touching the entries."""
        self._cancel_pending()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _prune(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Ignoring stale prune for transition %d", generation)
            return
        self._pending = None
        self._entries = [
            entry for entry in self._entries if entry.mode is not LifecycleMode.DISAPPEAR
        ]
        logger.debug("Transition %d settled with %d views", generation, len(self._entries))
        if self._on_settle is not None:
            self._on_settle(self.entries)
