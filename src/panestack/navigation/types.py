"""View and view-state models plus the persisted record codec.

The persisted record is the JSON-serializable shape stored in the host
history::

    {
        "id": "<active view id>",
        "views": [
            {"id": "...", "url": "...", "queryParams": {...}, "props": {...},
             "layout": "modal", "target": "_void"},
        ],
    }

``ViewState`` is immutable; every state-machine operation produces a new
one and commits it wholesale.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from panestack.href import Params


class Target(StrEnum):
    """Where a navigation lands.

    ``TOP`` collapses the stack to a single view, ``VOID`` renders off
    the visible stack, ``BLANK`` is left to the host (new window).
    """

    SELF = "_self"
    TOP = "_top"
    BLANK = "_blank"
    VOID = "_void"


class Trigger(StrEnum):
    """What caused a state change notification."""

    INIT = "init"
    LOAD = "load"
    POPSTATE = "popstate"
    PUSHSTATE = "pushstate"
    REPLACESTATE = "replacestate"


@dataclass(frozen=True, slots=True)
class ViewDef:
    """One entry in the view stack. Identity is ``id``; ``url`` may repeat."""

    id: str
    url: str
    query_params: Params = field(default_factory=dict)
    props: Params = field(default_factory=dict)
    layout: str | None = None
    target: Target | None = None

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "queryParams": dict(self.query_params),
            "props": dict(self.props),
        }
        if self.layout is not None:
            record["layout"] = self.layout
        if self.target is not None:
            record["target"] = self.target.value
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ViewDef:
        target = record.get("target")
        return cls(
            id=record["id"],
            url=record["url"],
            query_params=dict(record.get("queryParams") or {}),
            props=dict(record.get("props") or {}),
            layout=record.get("layout"),
            target=Target(target) if target else None,
        )


@dataclass(frozen=True, slots=True)
class ViewState:
    """The active view id and the ordered view stack."""

    active_id: str
    views: tuple[ViewDef, ...] = ()

    def find(self, view_id: str | None) -> ViewDef | None:
        """Return the view with *view_id*, or None."""
        for view in self.views:
            if view.id == view_id:
                return view
        return None

    def index_of(self, view_id: str | None) -> int:
        """Return the stack position of *view_id*, or -1."""
        for index, view in enumerate(self.views):
            if view.id == view_id:
                return index
        return -1

    def find_by_url(self, url: str) -> ViewDef | None:
        """Return the first view whose canonical URL equals *url*."""
        for view in self.views:
            if view.url == url:
                return view
        return None

    @property
    def active_view(self) -> ViewDef | None:
        return self.find(self.active_id)

    def to_record(self) -> dict[str, Any]:
        return {"id": self.active_id, "views": [view.to_record() for view in self.views]}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ViewState:
        """Decode a record.  Callers check ``is_valid_record`` first."""
        return cls(
            active_id=record["id"],
            views=tuple(ViewDef.from_record(view) for view in record["views"]),
        )


_TARGET_VALUES = frozenset(target.value for target in Target)


def _is_valid_view_record(value: object) -> bool:
    if not isinstance(value, Mapping):
        return False
    if not isinstance(value.get("id"), str) or not isinstance(value.get("url"), str):
        return False
    for key in ("queryParams", "props"):
        if value.get(key) is not None and not isinstance(value[key], Mapping):
            return False
    target = value.get("target")
    return not target or target in _TARGET_VALUES


def is_valid_record(value: object) -> bool:
    """Check that *value* is a structurally valid persisted view state.

    Requires a mapping with an ``id`` and a ``views`` list whose entries
    each carry a string ``id`` and ``url``.  A non-empty stack must
    contain the active id.
    """
    if not isinstance(value, Mapping):
        return False
    if "id" not in value or "views" not in value:
        return False
    views = value["views"]
    if not isinstance(views, Sequence) or isinstance(views, (str, bytes)):
        return False
    if not all(_is_valid_view_record(view) for view in views):
        return False
    if views and not any(view["id"] == value["id"] for view in views):
        return False
    return True
