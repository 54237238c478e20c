"""Viewport-width allocation for concurrently visible views.

Each view declares breakpoints: above a screen width threshold it needs at
least ``min_vw`` percent of the viewport.  Allocation gives every view its
minimum and shares whatever is left proportionally to those minimums.
When the minimums already exceed 100% nothing is shrunk; the overflow is
left for the caller to clip or scroll.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from panestack.transitions.diff import LifecycleMode

TOTAL_VW = 100

# Minimum assumed for a view with no breakpoint at or below the screen width
DEFAULT_MIN_VW = 100


@dataclass(frozen=True, slots=True)
class BreakpointWidth:
    """From ``threshold_px`` upward, the view needs at least ``min_vw`` percent."""

    threshold_px: float
    min_vw: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BreakpointWidth:
        """Accept both ``{"breakpoint", "minVw"}`` and ``{"threshold_px", "min_vw"}``."""
        if "breakpoint" in data:
            return cls(threshold_px=data["breakpoint"], min_vw=data["minVw"])
        return cls(threshold_px=data["threshold_px"], min_vw=data["min_vw"])


@dataclass(frozen=True, slots=True)
class SizedView:
    """Allocation input: a view id, its breakpoints, and its transition mode."""

    id: str
    breakpoints: tuple[BreakpointWidth, ...] = ()
    mode: LifecycleMode | None = None


@dataclass(frozen=True, slots=True)
class ViewAllocation:
    """Allocated viewport width for one view, in percent."""

    id: str
    vw: float


def minimum_vw(breakpoints: Iterable[BreakpointWidth], screen_width_px: float) -> float:
    """Return the ``min_vw`` of the largest threshold not above *screen_width_px*."""
    applicable = [bp for bp in breakpoints if bp.threshold_px <= screen_width_px]
    if not applicable:
        return DEFAULT_MIN_VW
    return max(applicable, key=lambda bp: bp.threshold_px).min_vw


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def allocate(
    screen_width_px: float,
    views: Sequence[SizedView],
    exclude_mode: LifecycleMode | None = None,
) -> list[ViewAllocation]:
    """Distribute viewport width among *views*.

    Views whose mode equals *exclude_mode* get 0 and place no demand on
    the others, but still appear in the output in input order.

    Args:
        screen_width_px: Current screen width in pixels.
        views: Views in stack order.
        exclude_mode: ``APPEAR`` at the start of a transition,
            ``DISAPPEAR`` at its end, ``None`` outside transitions.

    Returns:
        One allocation per input view.  Widths are whole percents when
        there is slack to share; the per-view rounding error is not
        redistributed.
    """
    included = [view for view in views if exclude_mode is None or view.mode != exclude_mode]
    minimums = {view.id: minimum_vw(view.breakpoints, screen_width_px) for view in included}
    total = sum(minimums.values())

    widths: dict[str, float]
    if total >= TOTAL_VW:
        widths = dict(minimums)
    elif total <= 0:
        # Only zero-width demands; nothing to share proportionally
        widths = dict.fromkeys(minimums, 0)
    else:
        extra = TOTAL_VW - total
        widths = {
            view_id: _round_half_up(min_vw + extra * (min_vw / total))
            for view_id, min_vw in minimums.items()
        }

    return [ViewAllocation(id=view.id, vw=widths.get(view.id, 0)) for view in views]


def allocate_transition(
    screen_width_px: float,
    views: Sequence[SizedView],
    phase: Literal["start", "end"],
) -> list[ViewAllocation]:
    """Allocate for one end of a transition.

    At ``"start"`` appearing views take no width; at ``"end"``
    disappearing views take none.
    """
    exclude = LifecycleMode.APPEAR if phase == "start" else LifecycleMode.DISAPPEAR
    return allocate(screen_width_px, views, exclude)


def visible_views(allocations: Sequence[ViewAllocation]) -> list[ViewAllocation]:
    """Return the trailing run of allocations that fits within 100%.

    Views are dropped from the front of the stack (the oldest) first.
    """
    total = 0.0
    start = 0
    for index in range(len(allocations) - 1, -1, -1):
        total += allocations[index].vw
        if total > TOTAL_VW:
            start = index + 1
            break
    return list(allocations[start:])
