"""View stack assembly for the rendering layer.

Resolves every view of a state against the route registry and splits
them into the visible stack and the off-stack ``_void`` views.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from panestack.allocation import SizedView
from panestack.navigation.types import Target, ViewDef
from panestack.routing.layouts import select_layouts
from panestack.routing.registry import RouteRegistry
from panestack.routing.route import ResolvedLayout, RouteMatch, ViewMeta
from panestack.transitions.diff import LifecycleMode, TransitionEntry


@dataclass(frozen=True, slots=True)
class StackedView:
    """A view with its route resolution.

    ``match`` is ``None`` when no route matches the view URL; render a
    not-found presentation (see ``RouteRegistry.error_component``).
    """

    view: ViewDef
    match: RouteMatch | None = None
    mode: LifecycleMode | None = None

    @property
    def found(self) -> bool:
        return self.match is not None

    @property
    def component(self) -> Any:
        return self.match.component if self.match is not None else None

    @property
    def params(self) -> dict[str, str]:
        return dict(self.match.params) if self.match is not None else {}

    @property
    def meta(self) -> ViewMeta:
        return self.match.meta if self.match is not None else ViewMeta()

    def layouts(self, default: Any = None) -> list[ResolvedLayout]:
        """The layouts this view renders with, selected by its layout key."""
        chain = self.match.layouts if self.match is not None else ()
        return select_layouts(chain, self.view.layout, default)

    def sized(self) -> SizedView:
        return SizedView(id=self.view.id, breakpoints=self.meta.breakpoints, mode=self.mode)


@dataclass(frozen=True, slots=True)
class ViewStack:
    stacked: tuple[StackedView, ...] = ()
    void: tuple[StackedView, ...] = ()


def resolve_view(
    view: ViewDef,
    registry: RouteRegistry,
    mode: LifecycleMode | None = None,
) -> StackedView:
    return StackedView(
        view=view,
        match=registry.match(urlsplit(view.url).path or "/"),
        mode=mode,
    )


def build_view_stack(views: Sequence[ViewDef], registry: RouteRegistry) -> ViewStack:
    """Resolve *views* and split the ``_void`` ones off the visible stack."""
    stacked: list[StackedView] = []
    void: list[StackedView] = []
    for view in views:
        resolved = resolve_view(view, registry)
        (void if view.target is Target.VOID else stacked).append(resolved)
    return ViewStack(stacked=tuple(stacked), void=tuple(void))


def build_transition_stack(
    entries: Sequence[TransitionEntry],
    registry: RouteRegistry,
) -> list[StackedView]:
    """Resolve transition entries, leaving out ``_void`` views."""
    return [
        resolve_view(entry.view, registry, entry.mode)
        for entry in entries
        if entry.view.target is not Target.VOID
    ]


@dataclass(frozen=True, slots=True)
class OpenView:
    """An open view matched by type, with its route params and focus state."""

    view: ViewDef
    params: dict[str, str]
    is_active: bool


def find_open_views(
    views: Sequence[ViewDef],
    registry: RouteRegistry,
    active_id: str,
    view_type: str,
    params: Mapping[str, str] | None = None,
) -> list[OpenView]:
    """Find open views whose route ``meta.type`` is *view_type*, in stack order.

    *params* is a partial match: every given key must equal the view's
    route param of that name; params not given are ignored.  Void views
    are included.
    """
    found: list[OpenView] = []
    for view in views:
        resolved = resolve_view(view, registry)
        if resolved.match is None or resolved.meta.type != view_type:
            continue
        view_params = resolved.params
        if params and any(view_params.get(key) != value for key, value in params.items()):
            continue
        found.append(OpenView(view=view, params=view_params, is_active=view.id == active_id))
    return found
