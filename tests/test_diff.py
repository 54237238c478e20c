"""Tests for panestack.transitions.diff — lifecycle classification."""

from panestack.navigation.types import Target, ViewDef
from panestack.transitions.diff import (
    LifecycleMode,
    TransitionEntry,
    diff,
    params_are_equal,
    views_are_equal,
)

A = ViewDef(id="a", url="http://localhost/a")
B = ViewDef(id="b", url="http://localhost/b")
C = ViewDef(id="c", url="http://localhost/c")
D = ViewDef(id="d", url="http://localhost/d")


def _modes(entries: list[TransitionEntry]) -> list[tuple[str, LifecycleMode]]:
    return [(entry.view.id, entry.mode) for entry in entries]


class TestDiff:
    def test_no_previous_is_init(self) -> None:
        assert _modes(diff([A, B], None)) == [("a", LifecycleMode.INIT), ("b", LifecycleMode.INIT)]
        assert _modes(diff([A], [])) == [("a", LifecycleMode.INIT)]

    def test_three_partitions(self) -> None:
        assert diff([B, C], [A, B]) == [
            TransitionEntry(B, LifecycleMode.BOTH),
            TransitionEntry(A, LifecycleMode.DISAPPEAR),
            TransitionEntry(C, LifecycleMode.APPEAR),
        ]

    def test_persisted_views_keep_previous_order(self) -> None:
        assert _modes(diff([B, A], [A, B])) == [("a", LifecycleMode.BOTH), ("b", LifecycleMode.BOTH)]

    def test_disappearing_keep_previous_order(self) -> None:
        assert _modes(diff([D], [A, B, C])) == [
            ("a", LifecycleMode.DISAPPEAR),
            ("b", LifecycleMode.DISAPPEAR),
            ("c", LifecycleMode.DISAPPEAR),
            ("d", LifecycleMode.APPEAR),
        ]

    def test_appearing_keep_current_order(self) -> None:
        assert _modes(diff([A, D, C], [A])) == [
            ("a", LifecycleMode.BOTH),
            ("d", LifecycleMode.APPEAR),
            ("c", LifecycleMode.APPEAR),
        ]

    def test_persisted_entry_carries_current_view(self) -> None:
        updated = ViewDef(id="a", url="http://localhost/a?page=2", query_params={"page": 2})

        (entry,) = diff([updated], [A])

        assert entry.view is updated
        assert entry.mode is LifecycleMode.BOTH

    def test_empty_current(self) -> None:
        assert _modes(diff([], [A])) == [("a", LifecycleMode.DISAPPEAR)]


class TestParamsAreEqual:
    def test_equal(self) -> None:
        assert params_are_equal({"a": 1, "b": "x"}, {"b": "x", "a": 1}) is True

    def test_types_must_match(self) -> None:
        assert params_are_equal({"a": 1}, {"a": True}) is False
        assert params_are_equal({"a": 1}, {"a": 1.0}) is False
        assert params_are_equal({"a": 1}, {"a": "1"}) is False

    def test_keys_must_match(self) -> None:
        assert params_are_equal({"a": 1}, {"b": 1}) is False
        assert params_are_equal({"a": 1}, {"a": 1, "b": 2}) is False

    def test_none(self) -> None:
        assert params_are_equal(None, None) is True
        assert params_are_equal(None, {}) is False
        assert params_are_equal({}, {}) is True


class TestViewsAreEqual:
    def test_structurally_equal_copies(self) -> None:
        copy = ViewDef(id="a", url="http://localhost/a")
        assert views_are_equal([A], [copy]) is True

    def test_differences(self) -> None:
        assert views_are_equal([A], [ViewDef(id="a", url="http://localhost/x")]) is False
        assert views_are_equal([A], [ViewDef(id="a", url=A.url, layout="modal")]) is False
        assert views_are_equal([A], [ViewDef(id="a", url=A.url, target=Target.VOID)]) is False
        assert views_are_equal([A], [ViewDef(id="a", url=A.url, props={"x": 1})]) is False
        assert views_are_equal([A], [ViewDef(id="a", url=A.url, query_params={"x": 1})]) is False

    def test_order_and_length(self) -> None:
        assert views_are_equal([A, B], [B, A]) is False
        assert views_are_equal([A], [A, B]) is False

    def test_none(self) -> None:
        assert views_are_equal(None, None) is True
        assert views_are_equal(None, []) is False
