"""Import resolution — turns ``"module:attribute"`` strings into a RouteRegistry.

Shared by ``panestack routes`` and ``panestack resolve``.
"""

import importlib
from collections.abc import Mapping
from typing import Any

from panestack.config import RouterConfig
from panestack.router import Router
from panestack.routing.registry import RouteRegistry
from panestack.routing.route import RouteManifest


def _to_registry(obj: Any, base_path: str | None) -> RouteRegistry | None:
    if isinstance(obj, Router):
        obj = obj.registry
    if isinstance(obj, RouteRegistry):
        if base_path is not None:
            obj.register((), base_path=base_path)
        return obj
    if isinstance(obj, Mapping):
        obj = RouteManifest.from_dict(obj)
    if isinstance(obj, RouteManifest):
        config = RouterConfig(base_path=base_path) if base_path is not None else None
        return RouteRegistry(obj, config)
    return None


def resolve_registry(import_string: str, base_path: str | None = None) -> RouteRegistry:
    """Resolve an import string to a route registry.

    Accepts ``"module:attribute"`` format.  When the attribute portion is
    omitted, defaults to ``"router"``.  The attribute may be a ``Router``,
    a ``RouteRegistry``, a ``RouteManifest``, a manifest dict, or a
    factory function returning one of those.

    Args:
        import_string: Dotted module path with optional ``:attribute``.
        base_path: Overrides the base path of the resolved registry.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the attribute resolves to something else.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "router"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    registry = _to_registry(obj, base_path)
    if registry is None and callable(obj):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc
        registry = _to_registry(obj, base_path)

    if registry is None:
        msg = (
            f"{import_string!r} resolved to {type(obj).__name__}, "
            "not a Router, RouteRegistry or route manifest"
        )
        raise TypeError(msg)
    return registry
