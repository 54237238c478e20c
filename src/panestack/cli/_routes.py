"""``panestack routes`` and ``panestack resolve`` — route table introspection."""

import argparse
import sys
from typing import Any
from urllib.parse import urlsplit

from panestack.cli._resolve import resolve_registry
from panestack.errors import ConfigurationError
from panestack.routing.layouts import select_layouts
from panestack.routing.registry import RouteRegistry
from panestack.routing.route import ResolvedLayout


def _load(args: argparse.Namespace) -> RouteRegistry:
    try:
        return resolve_registry(args.target, args.base_path)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def _handle_name(handle: Any) -> str:
    return getattr(handle, "__name__", None) or str(handle)


def _layout_names(layouts: tuple[ResolvedLayout, ...] | list[ResolvedLayout]) -> str:
    names = [
        _handle_name(layout.component) + (f"#{layout.key}" if layout.key else "")
        for layout in layouts
    ]
    return " > ".join(names) or "-"


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of PATH, PARAMS, COMPONENT, and LAYOUTS in match order."""
    registry = _load(args)
    routes = registry.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = [
        (
            route.path,
            ", ".join(route.param_names) or "-",
            _handle_name(route.component),
            _layout_names(registry.layouts_for(route)),
        )
        for route in routes
    ]

    headers = ("PATH", "PARAMS", "COMPONENT", "LAYOUTS")
    widths = [max(len(headers[i]), *(len(row[i]) for row in rows)) for i in range(3)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(f"Base path: {registry.base_path}")
    print(fmt.format(*headers))
    print("-" * min(sum(widths) + 6 + max(len(row[3]) for row in rows), 80))
    for row in rows:
        print(fmt.format(*row))


def run_resolve(args: argparse.Namespace) -> None:
    """Resolve one path and print its component, params, and layout chain.

    Exits with status 1 when nothing matches, after printing the error
    component that would handle the path (if any).
    """
    registry = _load(args)
    path = urlsplit(args.path).path or "/"
    match = registry.match(path)
    if match is None:
        error = registry.error_component(path)
        print(f"No route matches {args.path!r}", file=sys.stderr)
        if error is not None:
            print(f"Error component: {_handle_name(error)}", file=sys.stderr)
        raise SystemExit(1)

    print(f"Route:     {match.route.path}")
    print(f"Component: {_handle_name(match.component)}")
    params = ", ".join(f"{key}={value}" for key, value in match.params.items())
    print(f"Params:    {params or '-'}")
    print(f"Layouts:   {_layout_names(select_layouts(match.layouts, args.layout))}")
    breakpoints = ", ".join(
        f"{bp.threshold_px:g}px>={bp.min_vw:g}vw" for bp in match.meta.breakpoints
    )
    print(f"Breakpoints: {breakpoints or '-'}")
