"""Panestack — client-side navigation for stacks of concurrently visible views.

Resolves URLs to components and nested layouts, keeps an ordered view
stack in sync with the host history, classifies view lifecycles across
navigations, and allocates viewport width between visible views.

Basic usage::

    from panestack import Router, RouteManifest

    router = Router(RouteManifest.from_dict({
        "routes": [
            {"path": "/", "component": "home"},
            {"path": "/users/[id]", "component": "user",
             "meta": {"breakpoints": [{"breakpoint": 768, "minVw": 40}]}},
        ],
    }))
    router.navigate(router.state.active_id, "/users/42")
    router.visible(1280)
"""

__version__ = "0.1.0"
__all__ = [
    "BreakpointWidth",
    "ConfigurationError",
    "DuplicateRouteError",
    "InvalidRouteError",
    "LifecycleMode",
    "MemoryHistory",
    "NavigationStateMachine",
    "PanestackError",
    "RouteDefinition",
    "RouteManifest",
    "RouteRegistry",
    "Router",
    "RouterConfig",
    "Target",
    "ViewDef",
    "ViewState",
    "allocate",
    "diff",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import panestack`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from panestack.router import Router

        return Router

    if name == "RouterConfig":
        from panestack.config import RouterConfig

        return RouterConfig

    if name in ("RouteDefinition", "RouteManifest"):
        from panestack.routing import route as _route

        return getattr(_route, name)

    if name == "RouteRegistry":
        from panestack.routing.registry import RouteRegistry

        return RouteRegistry

    if name == "NavigationStateMachine":
        from panestack.navigation.machine import NavigationStateMachine

        return NavigationStateMachine

    if name == "MemoryHistory":
        from panestack.navigation.history import MemoryHistory

        return MemoryHistory

    if name in ("Target", "ViewDef", "ViewState"):
        from panestack.navigation import types as _types

        return getattr(_types, name)

    if name in ("LifecycleMode", "diff"):
        from panestack.transitions import diff as _diff

        return getattr(_diff, name)

    if name in ("BreakpointWidth", "allocate"):
        from panestack import allocation as _allocation

        return getattr(_allocation, name)

    if name in ("ConfigurationError", "DuplicateRouteError", "InvalidRouteError", "PanestackError"):
        from panestack import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
