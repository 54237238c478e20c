"""Route definitions, compiled routes, and match results as frozen dataclasses."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from panestack.allocation import BreakpointWidth


@dataclass(frozen=True, slots=True)
class ViewMeta:
    """Per-route metadata consumed outside the router.

    ``breakpoints`` drive width allocation for views showing this route.
    ``type`` groups routes so open views can be looked up by kind
    (``"article"``, ``"section"``).
    """

    breakpoints: tuple[BreakpointWidth, ...] = ()
    type: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ViewMeta:
        """Build from ``{"type": "article", "breakpoints": [{"breakpoint": 768, "minVw": 50}]}``."""
        if not data:
            return cls()
        return cls(
            breakpoints=tuple(
                bp if isinstance(bp, BreakpointWidth) else BreakpointWidth.from_dict(bp)
                for bp in data.get("breakpoints", ())
            ),
            type=data.get("type"),
        )


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:  ``/users``  (is_param=False)
    Dynamic:  ``/[id]``   (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A route as declared by the application.

    ``component`` and ``layouts`` are opaque handles; the router orders
    and returns them but never inspects them.
    """

    path: str
    component: Any
    layouts: tuple[Any, ...] | None = None
    meta: ViewMeta = field(default_factory=ViewMeta)


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A definition plus its derived matcher."""

    definition: RouteDefinition
    segments: tuple[PathSegment, ...]
    pattern: re.Pattern[str]
    param_names: tuple[str, ...]

    @property
    def path(self) -> str:
        return self.definition.path

    @property
    def component(self) -> Any:
        return self.definition.component

    @property
    def meta(self) -> ViewMeta:
        return self.definition.meta


@dataclass(frozen=True, slots=True)
class ResolvedLayout:
    """One link of a layout chain.

    ``key`` is the variant name for ``path#variant`` declarations and
    ``None`` for the default (unnamed) layout.
    """

    component: Any
    key: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match, handed to the rendering layer."""

    route: CompiledRoute
    component: Any
    layouts: tuple[ResolvedLayout, ...]
    params: dict[str, str]
    meta: ViewMeta


@dataclass(frozen=True, slots=True)
class RouteManifest:
    """Route configuration input: routes, layouts by path, error handlers by path.

    Layout keys may carry a ``#variant`` suffix (``"/users#modal"``).
    """

    routes: tuple[RouteDefinition, ...] = ()
    layouts: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RouteManifest:
        """Build a manifest from the plain-dict configuration shape::

            {
                "routes": [{"path": "/users/[id]", "component": UserView,
                            "layouts": [Shell], "meta": {"breakpoints": [...]}}],
                "layouts": {"/": RootLayout, "/users#modal": ModalLayout},
                "errors": {"/": ErrorView},
            }

        Route entries are passed through verbatim so the registry can
        apply its own validation policy to malformed ones.
        """
        routes: list[RouteDefinition] = []
        for entry in data.get("routes", ()):
            if isinstance(entry, RouteDefinition):
                routes.append(entry)
                continue
            if not isinstance(entry, Mapping):
                # Left for registry validation to reject or skip
                routes.append(RouteDefinition(path="", component=None))
                continue
            layouts = entry.get("layouts")
            routes.append(
                RouteDefinition(
                    path=entry.get("path", ""),
                    component=entry.get("component"),
                    layouts=tuple(layouts) if layouts is not None else None,
                    meta=_coerce_meta(entry.get("meta")),
                )
            )
        return cls(
            routes=tuple(routes),
            layouts=dict(data.get("layouts") or {}),
            errors=dict(data.get("errors") or {}),
        )


def _coerce_meta(meta: ViewMeta | Mapping[str, Any] | None) -> ViewMeta:
    if isinstance(meta, ViewMeta):
        return meta
    return ViewMeta.from_dict(meta)


def as_definitions(routes: Sequence[RouteDefinition | Mapping[str, Any]]) -> tuple[RouteDefinition, ...]:
    """Normalize a mixed list of definitions and plain dicts."""
    return RouteManifest.from_dict({"routes": routes}).routes
