"""Route registry: compiled route table, layout chains, error handlers, base path.

Routes are tested in registration order and the first structural match
wins; there is no specificity scoring.  Register ``/users/new`` before
``/users/[id]`` when both should resolve.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import urlsplit

from panestack.config import RouterConfig
from panestack.errors import DuplicateRouteError, InvalidRouteError
from panestack.href import is_absolute
from panestack.routing.layouts import collect_layouts, path_prefixes
from panestack.routing.pattern import compile_route, match_route
from panestack.routing.route import (
    CompiledRoute,
    ResolvedLayout,
    RouteDefinition,
    RouteManifest,
    RouteMatch,
    as_definitions,
)

logger = logging.getLogger("panestack.routing")


def normalize_base_path(base_path: str | None) -> str:
    """Normalize a base path: leading ``/``, no trailing ``/``, empty means root.

    Examples::

        ""          -> "/"
        "my-app"    -> "/my-app"
        "/my-app/"  -> "/my-app"
    """
    if not base_path or base_path == "/":
        return "/"
    if not base_path.startswith("/"):
        base_path = "/" + base_path
    return base_path.rstrip("/") or "/"


def normalize_path(path: str) -> str:
    """Drop query and fragment, and a single trailing ``/`` except on root."""
    for sep in ("?", "#"):
        path = path.partition(sep)[0]
    if not path:
        return "/"
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


class RouteRegistry:
    """Compiled route table with layout and error-handler resolution.

    Usage::

        registry = RouteRegistry(
            RouteManifest.from_dict({
                "routes": [{"path": "/users/[id]", "component": UserView}],
                "layouts": {"/": Shell},
            }),
            RouterConfig(base_path="/app"),
        )
        match = registry.match("/app/users/42")
        match.params  # {"id": "42"}
    """

    __slots__ = ("_base_path", "_config", "_errors", "_layouts", "_routes")

    def __init__(self, manifest: RouteManifest | None = None, config: RouterConfig | None = None) -> None:
        self._config = config or RouterConfig()
        self._base_path = normalize_base_path(self._config.base_path)
        self._routes: dict[str, CompiledRoute] = {}
        self._layouts: dict[str, Any] = {}
        self._errors: dict[str, Any] = {}
        if manifest is not None:
            self.register(manifest.routes, manifest.layouts, manifest.errors)

    # -- Registration ------------------------------------------------------

    def register(
        self,
        routes: Iterable[RouteDefinition | Mapping[str, Any]],
        layouts: Mapping[str, Any] | None = None,
        errors: Mapping[str, Any] | None = None,
        base_path: str | None = None,
    ) -> None:
        """Compile and add routes, layouts, and error handlers.

        Args:
            routes: Route definitions or plain dicts (``path``,
                ``component``, ``layouts``, ``meta``).
            layouts: Layout handles keyed by ``path`` or ``path#variant``.
            errors: Error handles keyed by path.
            base_path: Replaces the configured base path when given.

        Raises:
            InvalidRouteError: Malformed route in strict mode.
            DuplicateRouteError: Repeated path under the ``"error"`` policy.
        """
        if base_path is not None:
            self._base_path = normalize_base_path(base_path)
        if layouts:
            self._layouts.update(layouts)
        if errors:
            self._errors.update(errors)

        for definition in as_definitions(list(routes)):
            reason = self._validate(definition)
            if reason is not None:
                if self._config.strict:
                    raise InvalidRouteError(definition.path, reason)
                logger.warning("Skipping route %r: %s", definition.path, reason)
                continue
            self._add(compile_route(definition))

    @staticmethod
    def _validate(definition: RouteDefinition) -> str | None:
        if not isinstance(definition.path, str) or not definition.path:
            return "path is empty"
        if not definition.path.startswith("/"):
            return "path must start with '/'"
        if definition.component is None:
            return "component is missing"
        return None

    def _add(self, route: CompiledRoute) -> None:
        path = route.path
        if path in self._routes:
            policy = self._config.duplicate_routes
            if policy == "error":
                raise DuplicateRouteError(path)
            if policy == "keep":
                logger.warning("Route %r already registered; keeping the first", path)
                return
            logger.debug("Route %r re-registered; replacing", path)
        self._routes[path] = route

    # -- Introspection -----------------------------------------------------

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def routes(self) -> list[CompiledRoute]:
        """All compiled routes in match order."""
        return list(self._routes.values())

    @property
    def layouts(self) -> dict[str, Any]:
        return dict(self._layouts)

    @property
    def errors(self) -> dict[str, Any]:
        return dict(self._errors)

    # -- Resolution --------------------------------------------------------

    def match(self, path: str) -> RouteMatch | None:
        """Resolve *path* to a route, its layout chain, and its params.

        The base path is stripped first.  Returns ``None`` when nothing
        matches; that is a normal outcome (render a not-found view).
        """
        candidate = normalize_path(self.strip_base_path(normalize_path(path)))
        for route in self._routes.values():
            params = match_route(route, candidate)
            if params is not None:
                return RouteMatch(
                    route=route,
                    component=route.component,
                    layouts=self.layouts_for(route),
                    params=params,
                    meta=route.meta,
                )
        return None

    def layouts_for(self, route: CompiledRoute) -> tuple[ResolvedLayout, ...]:
        """Return the layout chain of *route*, outermost first.

        Explicit route layouts win and are returned unnamed; otherwise the
        chain is collected from the layouts registered along the route path.
        """
        if route.definition.layouts:
            return tuple(ResolvedLayout(component=layout) for layout in route.definition.layouts)
        return collect_layouts(route.path, self._layouts)

    def error_component(self, path: str) -> Any | None:
        """Find the error handler for *path*, walking up to the root.

        Returns ``None`` when no handler is registered anywhere along the
        path; the caller supplies a generic fallback.
        """
        candidate = normalize_path(self.strip_base_path(normalize_path(path)))
        if candidate in self._errors:
            return self._errors[candidate]
        # Most specific prefix first
        for prefix in reversed(path_prefixes(candidate)):
            if prefix in self._errors:
                return self._errors[prefix]
        return None

    # -- Base path ---------------------------------------------------------

    def get_full_path(self, route_path: str) -> str:
        """Prefix *route_path* with the base path.

        Query strings and fragments are preserved.  Paths already under the
        base path and absolute URLs are returned unchanged.

        Examples (base path ``/app``)::

            "/"              -> "/app"
            "/users?page=1"  -> "/app/users?page=1"
            "/app/users"     -> "/app/users"
            "https://x.io/"  -> "https://x.io/"
        """
        base = self._base_path
        if base == "/" or is_absolute(route_path):
            return route_path
        markers = [i for i in (route_path.find("?"), route_path.find("#")) if i >= 0]
        split_at = min(markers, default=len(route_path))
        path, suffix = route_path[:split_at], route_path[split_at:]
        if path == base or path.startswith(base + "/"):
            return route_path
        if path in ("", "/"):
            return base + suffix
        if not path.startswith("/"):
            path = "/" + path
        return base + path + suffix

    def strip_base_path(self, path: str) -> str:
        """Remove the base path prefix from an inbound path.

        Paths outside the base path are returned unchanged so they fail to
        match routes rather than match the wrong one.
        """
        base = self._base_path
        if base == "/":
            return path
        if path == base:
            return "/"
        if path.startswith(base + "/"):
            return path[len(base) :]
        return path

    def get_path_from_url(self, url: str) -> str:
        """Extract the route path from a URL or path, stripping the base path.

        Examples (base path ``/app``)::

            "http://host/app/users?x=1"  -> "/users"
            "/app/users#top"             -> "/users"
        """
        path = normalize_path(urlsplit(url).path if is_absolute(url) else url)
        return self.strip_base_path(path)
