"""The Router — wires the registry, state machine, and transition tracker.

Subscribes to the history store so every push, replace, or popstate
recomputes the transition and notifies listeners with the new state.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeAlias
from urllib.parse import urlsplit

from panestack.allocation import ViewAllocation, allocate, allocate_transition, visible_views
from panestack.config import RouterConfig
from panestack.href import Scalar
from panestack.navigation.history import HistoryEvent, HistoryStore, MemoryHistory
from panestack.navigation.machine import NavigationStateMachine
from panestack.navigation.types import Target, Trigger, ViewState, is_valid_record
from panestack.routing.registry import RouteRegistry
from panestack.routing.route import RouteManifest, RouteMatch
from panestack.stack import (
    OpenView,
    StackedView,
    ViewStack,
    build_transition_stack,
    build_view_stack,
    find_open_views,
)
from panestack.transitions.diff import TransitionEntry
from panestack.transitions.scheduler import ManualScheduler, Scheduler
from panestack.transitions.tracker import TransitionTracker

logger = logging.getLogger("panestack.navigation")


@dataclass(frozen=True, slots=True)
class RouterEvent:
    """Notification sent to router listeners.

    ``settled`` is True when the event reports the end of a transition
    window rather than a history change; ``trigger`` then repeats the
    trigger of the change that started the transition.
    """

    trigger: Trigger
    state: ViewState
    entries: tuple[TransitionEntry, ...]
    settled: bool = False


RouterListener: TypeAlias = Callable[[RouterEvent], None]


class Router:
    """Client-side navigation over a stack of concurrently visible views.

    Usage::

        router = Router(
            RouteManifest.from_dict({"routes": [{"path": "/", "component": Home},
                                                {"path": "/users/[id]", "component": User}]}),
            history=MemoryHistory("http://localhost/"),
        )
        router.navigate(router.state.active_id, "/users/42")
        router.view_stack().stacked[-1].params  # {"id": "42"}

    Args:
        manifest: Routes, layouts, and error handlers.
        config: Router configuration.
        history: Host history store (in-memory by default).
        scheduler: Timer capability for pruning disappearing views
            (a ``ManualScheduler`` by default).
        id_factory: Produces new view ids.
    """

    def __init__(
        self,
        manifest: RouteManifest | None = None,
        config: RouterConfig | None = None,
        *,
        history: HistoryStore | None = None,
        scheduler: Scheduler | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.config = config or RouterConfig()
        self.registry = RouteRegistry(manifest, self.config)
        self.history: HistoryStore = history or MemoryHistory(
            self.config.origin + self.registry.base_path
        )
        self.scheduler: Scheduler = scheduler or ManualScheduler()
        self.machine = NavigationStateMachine(
            self.registry, self.history, self.config, id_factory=id_factory
        )
        self.tracker = TransitionTracker(
            self.scheduler,
            self.config.transition_duration,
            on_settle=self._on_settle,
        )
        self._listeners: list[RouterListener] = []
        self._trigger = Trigger.LOAD

        base = self.registry.base_path
        if base != "/" and urlsplit(self.history.location).path in ("", "/"):
            # Mounted under a base path but loaded at the bare origin
            self.history.replace(None, base)

        self._unsubscribe = self.history.subscribe(self._on_history)
        self.tracker.update(self.machine.state.views)

    # -- State -------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self.machine.state

    @property
    def trigger(self) -> Trigger:
        """Trigger of the most recent state change."""
        return self._trigger

    @property
    def entries(self) -> list[TransitionEntry]:
        """Transition entries of the most recent change."""
        return self.tracker.entries

    def match(self, path: str) -> RouteMatch | None:
        return self.registry.match(path)

    # -- Navigation --------------------------------------------------------

    def navigate(
        self,
        from_view_id: str | None,
        target_path: str,
        query_params: Mapping[str, Scalar] | None = None,
        *,
        append: bool = False,
        target: Target | str | None = None,
        props: Mapping[str, Scalar] | None = None,
        layout: str | None = None,
    ) -> ViewState | None:
        return self.machine.navigate(
            from_view_id,
            target_path,
            query_params,
            append=append,
            target=target,
            props=props,
            layout=layout,
        )

    def close(self, view_id: str) -> ViewState | None:
        return self.machine.close(view_id)

    def set_active(self, view_id: str) -> ViewState | None:
        return self.machine.set_active(view_id)

    def update_query_params(
        self, view_id: str, query_params: Mapping[str, Scalar], replace_all: bool = False
    ) -> ViewState | None:
        return self.machine.update_query_params(view_id, query_params, replace_all)

    def update_props(
        self, view_id: str, props: Mapping[str, Scalar], replace_all: bool = False
    ) -> ViewState | None:
        return self.machine.update_props(view_id, props, replace_all)

    # -- Rendering support -------------------------------------------------

    def view_stack(self) -> ViewStack:
        """Resolve the current views, split into visible stack and void views."""
        return build_view_stack(self.state.views, self.registry)

    def transition_stack(self) -> list[StackedView]:
        """Resolve the current transition entries (void views excluded)."""
        return build_transition_stack(self.tracker.entries, self.registry)

    def open_views(self, view_type: str, params: Mapping[str, str] | None = None) -> list[OpenView]:
        """Open views of routes whose ``meta.type`` is *view_type*.

        Usage::

            router.open_views("article")               # every open article
            router.open_views("article", {"id": "7"})  # only article 7
        """
        state = self.state
        return find_open_views(state.views, self.registry, state.active_id, view_type, params)

    def allocations(self, screen_width_px: float, phase: str | None = None) -> list[ViewAllocation]:
        """Allocate widths for the views of the current transition.

        Args:
            screen_width_px: Current screen width.
            phase: ``"start"`` or ``"end"`` of the transition; ``None``
                ignores lifecycle modes.
        """
        sized = [view.sized() for view in self.transition_stack()]
        if phase is None:
            return allocate(screen_width_px, sized)
        if phase not in ("start", "end"):
            msg = f"phase must be 'start', 'end' or None, got {phase!r}"
            raise ValueError(msg)
        return allocate_transition(screen_width_px, sized, phase)

    def visible(self, screen_width_px: float) -> list[tuple[StackedView, float]]:
        """The trailing views that fit on screen, paired with their widths."""
        stacked = self.view_stack().stacked
        allocations = allocate(screen_width_px, [view.sized() for view in stacked])
        fitting = visible_views(allocations)
        offset = len(stacked) - len(fitting)
        return [(stacked[offset + i], alloc.vw) for i, alloc in enumerate(fitting)]

    # -- Notifications -----------------------------------------------------

    def subscribe(self, listener: RouterListener) -> Callable[[], None]:
        """Register *listener* for state changes; return an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Detach from the history store and cancel any pending prune."""
        self._unsubscribe()
        self.tracker.cancel()
        self._listeners.clear()

    def _on_history(self, event: HistoryEvent) -> None:
        if not is_valid_record(event.record):
            # Entry written outside the router (or corrupted); reading the
            # state self-heals it, and that replace notifies us again.
            logger.debug("History %s to %s carried no view state", event.trigger, event.url)
            self.machine.load()
            return
        self._trigger = event.trigger
        state = ViewState.from_record(event.record)
        entries = self.tracker.update(state.views)
        self._notify(RouterEvent(trigger=event.trigger, state=state, entries=tuple(entries)))

    def _on_settle(self, entries: list[TransitionEntry]) -> None:
        self._notify(
            RouterEvent(
                trigger=self._trigger,
                state=self.state,
                entries=tuple(entries),
                settled=True,
            )
        )

    def _notify(self, event: RouterEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
