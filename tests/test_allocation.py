"""Tests for panestack.allocation — viewport width distribution."""

import pytest

from panestack.allocation import (
    BreakpointWidth,
    SizedView,
    ViewAllocation,
    allocate,
    allocate_transition,
    minimum_vw,
    visible_views,
)
from panestack.transitions.diff import LifecycleMode


def _view(view_id: str, min_vw: float, mode: LifecycleMode | None = None) -> SizedView:
    return SizedView(id=view_id, breakpoints=(BreakpointWidth(0, min_vw),), mode=mode)


def _widths(allocations: list[ViewAllocation]) -> list[float]:
    return [allocation.vw for allocation in allocations]


class TestBreakpointWidth:
    def test_from_camel_case(self) -> None:
        assert BreakpointWidth.from_dict({"breakpoint": 768, "minVw": 50}) == BreakpointWidth(768, 50)

    def test_from_snake_case(self) -> None:
        assert BreakpointWidth.from_dict({"threshold_px": 768, "min_vw": 50}) == BreakpointWidth(768, 50)


class TestMinimumVw:
    breakpoints = (BreakpointWidth(768, 50), BreakpointWidth(1200, 30), BreakpointWidth(0, 100))

    @pytest.mark.parametrize(
        ("width", "expected"),
        [(500, 100), (767, 100), (768, 50), (1000, 50), (1200, 30), (2560, 30)],
    )
    def test_largest_threshold_not_above_width(self, width: float, expected: float) -> None:
        assert minimum_vw(self.breakpoints, width) == expected

    def test_defaults_to_full_width(self) -> None:
        assert minimum_vw((), 1000) == 100
        assert minimum_vw((BreakpointWidth(1200, 30),), 1000) == 100


class TestAllocate:
    def test_slack_shared_proportionally(self) -> None:
        assert _widths(allocate(1000, [_view("a", 40), _view("b", 40)])) == [50, 50]

    def test_full_width_view_never_shrinks(self) -> None:
        assert _widths(allocate(1000, [_view("a", 100), _view("b", 40)])) == [100, 40]

    def test_overflow_keeps_minimums(self) -> None:
        assert _widths(allocate(1000, [_view("a", 60), _view("b", 70)])) == [60, 70]

    def test_no_breakpoints_means_full_width(self) -> None:
        assert _widths(allocate(1000, [SizedView("a")])) == [100]

    def test_rounding_is_per_view(self) -> None:
        assert _widths(allocate(1000, [_view("a", 30), _view("b", 30), _view("c", 30)])) == [33, 33, 33]

    def test_halves_round_up(self) -> None:
        assert _widths(allocate(1000, [_view("a", 25), _view("b", 15)])) == [63, 38]

    def test_excluded_views_get_zero_but_keep_position(self) -> None:
        views = [
            _view("a", 40, LifecycleMode.BOTH),
            _view("b", 40, LifecycleMode.APPEAR),
            _view("c", 40, LifecycleMode.BOTH),
        ]

        allocations = allocate(1000, views, LifecycleMode.APPEAR)

        assert [allocation.id for allocation in allocations] == ["a", "b", "c"]
        assert _widths(allocations) == [50, 0, 50]

    def test_empty(self) -> None:
        assert allocate(1000, []) == []

    def test_uses_screen_width(self) -> None:
        view = SizedView("a", breakpoints=(BreakpointWidth(0, 100), BreakpointWidth(1024, 40)))
        other = SizedView("b", breakpoints=(BreakpointWidth(0, 100), BreakpointWidth(1024, 60)))

        assert _widths(allocate(800, [view, other])) == [100, 100]
        assert _widths(allocate(1280, [view, other])) == [40, 60]


class TestAllocateTransition:
    views = [_view("old", 50, LifecycleMode.DISAPPEAR), _view("new", 50, LifecycleMode.APPEAR)]

    def test_start_excludes_appearing(self) -> None:
        assert _widths(allocate_transition(1000, self.views, "start")) == [100, 0]

    def test_end_excludes_disappearing(self) -> None:
        assert _widths(allocate_transition(1000, self.views, "end")) == [0, 100]


class TestVisibleViews:
    def test_all_fit(self) -> None:
        allocations = [ViewAllocation("a", 50), ViewAllocation("b", 50)]
        assert visible_views(allocations) == allocations

    def test_drops_oldest_first(self) -> None:
        allocations = [ViewAllocation("a", 100), ViewAllocation("b", 50), ViewAllocation("c", 50)]
        assert [allocation.id for allocation in visible_views(allocations)] == ["b", "c"]

    def test_keeps_only_last_when_each_is_wide(self) -> None:
        allocations = [ViewAllocation("a", 60), ViewAllocation("b", 60)]
        assert [allocation.id for allocation in visible_views(allocations)] == ["b"]

    def test_empty(self) -> None:
        assert visible_views([]) == []
