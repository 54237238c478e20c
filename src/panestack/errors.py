"""Panestack exception hierarchy.

Shared across the registry, state machine, and CLI so every module
raises and catches the same types.
"""


class PanestackError(Exception):
    """Base for all panestack-specific errors."""


class ConfigurationError(PanestackError):
    """Raised when router configuration or route registration is invalid."""


class InvalidRouteError(ConfigurationError):
    """A route definition was rejected during registration.

    Only raised in strict mode; lenient registries log and skip instead.
    """

    def __init__(self, path: object, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid route {path!r}: {reason}")


class DuplicateRouteError(ConfigurationError):
    """A route path was registered twice under the ``"error"`` duplicate policy."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Route {path!r} is already registered. "
            "Set duplicate_routes='replace' or 'keep' to allow re-registration."
        )
