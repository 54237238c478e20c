"""Transition diff between two view stacks.

Classifies every view involved in a navigation:

- ``init``: first render, no previous stack
- ``both``: present before and after
- ``disappear``: present before only
- ``appear``: present after only

The output order is a rendering contract: persisted views first in their
previous order, then disappearing views in their previous order (so they
exit from their old slot), then appearing views in current order.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from panestack.navigation.types import ViewDef


class LifecycleMode(StrEnum):
    INIT = "init"
    BOTH = "both"
    APPEAR = "appear"
    DISAPPEAR = "disappear"


@dataclass(frozen=True, slots=True)
class TransitionEntry:
    """A view annotated with its lifecycle mode for one transition."""

    view: ViewDef
    mode: LifecycleMode


def diff(current: Sequence[ViewDef], previous: Sequence[ViewDef] | None) -> list[TransitionEntry]:
    """Combine current and previous stacks into one list of transition entries."""
    if not previous:
        return [TransitionEntry(view, LifecycleMode.INIT) for view in current]

    current_by_id = {view.id: view for view in current}
    persisted: list[TransitionEntry] = []
    disappearing: list[TransitionEntry] = []
    for prev_view in previous:
        curr_view = current_by_id.get(prev_view.id)
        if curr_view is not None:
            persisted.append(TransitionEntry(curr_view, LifecycleMode.BOTH))
        else:
            disappearing.append(TransitionEntry(prev_view, LifecycleMode.DISAPPEAR))

    matched = {entry.view.id for entry in persisted}
    appearing = [
        TransitionEntry(view, LifecycleMode.APPEAR) for view in current if view.id not in matched
    ]
    return [*persisted, *disappearing, *appearing]


def params_are_equal(a: Mapping[str, object] | None, b: Mapping[str, object] | None) -> bool:
    """Shallow value comparison of two params mappings.

    Values must match in type as well (``1`` differs from ``True``).
    ``None`` only equals ``None``.
    """
    if a is None or b is None:
        return a is b
    if len(a) != len(b):
        return False
    for key, value in a.items():
        if key not in b:
            return False
        other = b[key]
        if type(value) is not type(other) or value != other:
            return False
    return True


def views_are_equal(a: Sequence[ViewDef] | None, b: Sequence[ViewDef] | None) -> bool:
    """Structural comparison of two view stacks.

    Detects whether a state change actually touched the views, so a new
    state object with identical content does not restart a transition.
    """
    if a is None or b is None:
        return a is b
    if len(a) != len(b):
        return False
    for view_a, view_b in zip(a, b, strict=True):
        if (view_a.id, view_a.url, view_a.layout, view_a.target) != (
            view_b.id,
            view_b.url,
            view_b.layout,
            view_b.target,
        ):
            return False
        if not params_are_equal(view_a.query_params, view_b.query_params):
            return False
        if not params_are_equal(view_a.props, view_b.props):
            return False
    return True
