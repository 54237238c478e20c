"""Layout chain resolution and composition.

Layouts are registered by the path they apply under, optionally with a
``#variant`` suffix::

    {"/": RootShell, "/admin": AdminShell, "/admin#modal": AdminModal}

A route's chain collects the layouts of every prefix of its path, root
first.  Variants are picked per view by its ``layout`` key, and the chain
is applied by folding from the innermost layout outward.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import reduce
from typing import Any, TypeVar

from panestack.routing.route import ResolvedLayout


def path_prefixes(path: str) -> list[str]:
    """Return every segment-boundary prefix of *path*, root first.

    Examples::

        "/"               -> ["/"]
        "/admin/users"    -> ["/", "/admin", "/admin/users"]
    """
    prefixes = ["/"]
    current = ""
    for part in path.strip("/").split("/"):
        if not part:
            continue
        current = f"{current}/{part}"
        prefixes.append(current)
    return prefixes


def split_layout_key(declared: str) -> tuple[str, str | None]:
    """Split ``"/users#modal"`` into ``("/users", "modal")``."""
    path, sep, variant = declared.partition("#")
    return (path or "/"), (variant if sep else None)


def collect_layouts(path: str, layouts: Mapping[str, Any]) -> tuple[ResolvedLayout, ...]:
    """Collect the layout chain for *path* from a layouts-by-path table.

    Within one prefix, layouts keep their table order.
    """
    by_prefix: dict[str, list[ResolvedLayout]] = {}
    for declared, component in layouts.items():
        prefix, variant = split_layout_key(declared)
        by_prefix.setdefault(prefix, []).append(ResolvedLayout(component=component, key=variant))

    chain: list[ResolvedLayout] = []
    for prefix in path_prefixes(path):
        chain.extend(by_prefix.get(prefix, ()))
    return tuple(chain)


def select_layouts(
    chain: Sequence[ResolvedLayout],
    layout_key: str | None,
    default: Any = None,
) -> list[ResolvedLayout]:
    """Pick the layouts a view renders with.

    Keeps the chain links whose key equals *layout_key* (``None`` selects
    the unnamed layouts).  An empty chain falls back to *default* when one
    is given.
    """
    if chain:
        return [layout for layout in chain if layout.key == layout_key]
    if default is not None:
        return [ResolvedLayout(component=default)]
    return []


T = TypeVar("T")


def compose_layouts(
    chain: Iterable[ResolvedLayout],
    content: T,
    wrap: Callable[[ResolvedLayout, T], T],
) -> T:
    """Wrap *content* in every layout of *chain*, outermost first.

    ``wrap(layout, inner)`` returns the wrapped value.  For the chain
    ``[Root, Admin]`` the result is ``wrap(Root, wrap(Admin, content))``.
    """
    return reduce(lambda inner, layout: wrap(layout, inner), reversed(list(chain)), content)
