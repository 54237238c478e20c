"""Router configuration.

RouterConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from typing import Literal

from panestack.errors import ConfigurationError

DuplicatePolicy = Literal["replace", "keep", "error"]

_DUPLICATE_POLICIES = ("replace", "keep", "error")


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(base_path="/app", strict=False)
    """

    # Mount point of the routed application ("/" = mounted at the root)
    base_path: str = "/"

    # Registration: raise on malformed routes (True) or log and skip them (False)
    strict: bool = True

    # Same path registered twice: "replace" (last wins), "keep" (first wins), "error"
    duplicate_routes: DuplicatePolicy = "replace"

    # Seconds disappearing views stay in the transition list before being pruned
    transition_duration: float = 0.3

    # Used to build canonical view URLs when the history store has no origin
    origin: str = "http://localhost"

    def __post_init__(self) -> None:
        if self.duplicate_routes not in _DUPLICATE_POLICIES:
            msg = (
                f"duplicate_routes must be one of {', '.join(_DUPLICATE_POLICIES)}, "
                f"got {self.duplicate_routes!r}"
            )
            raise ConfigurationError(msg)
        if self.transition_duration < 0:
            msg = f"transition_duration must be >= 0, got {self.transition_duration!r}"
            raise ConfigurationError(msg)
        if "://" not in self.origin:
            msg = f"origin must be an absolute URL origin, got {self.origin!r}"
            raise ConfigurationError(msg)
