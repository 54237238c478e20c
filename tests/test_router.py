"""Tests for panestack.router — the wired-up router."""

import itertools

import pytest

from panestack.config import RouterConfig
from panestack.navigation.history import MemoryHistory
from panestack.navigation.types import Trigger
from panestack.router import Router, RouterEvent
from panestack.routing.route import RouteManifest
from panestack.transitions.diff import LifecycleMode
from panestack.transitions.scheduler import ManualScheduler

HALF = {"breakpoints": [{"breakpoint": 0, "minVw": 40}]}

MANIFEST = RouteManifest.from_dict(
    {
        "routes": [
            {"path": "/", "component": "Home", "meta": HALF},
            {"path": "/users/[id]", "component": "User", "meta": HALF},
            {"path": "/wide", "component": "Wide"},
        ],
        "layouts": {"/": "Root"},
    }
)


def _router(config: RouterConfig | None = None, history: MemoryHistory | None = None) -> Router:
    counter = itertools.count(1)
    return Router(
        MANIFEST,
        config,
        history=history,
        scheduler=ManualScheduler(),
        id_factory=lambda: f"v{next(counter)}",
    )


def _modes(router: Router) -> list[tuple[str, LifecycleMode]]:
    return [(entry.view.id, entry.mode) for entry in router.entries]


@pytest.fixture
def router() -> Router:
    return _router()


@pytest.fixture
def events(router: Router) -> list[RouterEvent]:
    received: list[RouterEvent] = []
    router.subscribe(received.append)
    return received


class TestRouterInit:
    def test_bootstraps_one_view(self, router: Router) -> None:
        assert router.state.active_id == "v1"
        assert router.history.location == "http://localhost/"
        assert _modes(router) == [("v1", LifecycleMode.INIT)]

    def test_base_path_moves_bare_origin(self) -> None:
        router = _router(RouterConfig(base_path="/app"), MemoryHistory("http://localhost/"))

        assert router.history.location == "http://localhost/app"
        assert router.state.views[0].url == "http://localhost/app"
        assert router.view_stack().stacked[0].component == "Home"

    def test_default_history_under_base_path(self) -> None:
        router = _router(RouterConfig(base_path="/app", origin="https://example.com"))
        assert router.history.location == "https://example.com/app"

    def test_match(self, router: Router) -> None:
        assert router.match("/users/5").params == {"id": "5"}


class TestRouterEvents:
    def test_navigate_notifies(self, router: Router, events: list[RouterEvent]) -> None:
        router.navigate("v1", "/users/1")

        (event,) = events
        assert event.trigger is Trigger.PUSHSTATE
        assert event.settled is False
        assert [view.id for view in event.state.views] == ["v1", "v2"]
        assert _modes(router) == [("v1", LifecycleMode.BOTH), ("v2", LifecycleMode.APPEAR)]
        assert router.trigger is Trigger.PUSHSTATE

    def test_noop_does_not_notify(self, router: Router, events: list[RouterEvent]) -> None:
        assert router.navigate("v1", "/") is None
        assert events == []

    def test_close_settles_after_window(self, router: Router, events: list[RouterEvent]) -> None:
        router.navigate("v1", "/users/1")
        router.close("v2")

        assert events[-1].trigger is Trigger.REPLACESTATE
        assert _modes(router) == [("v1", LifecycleMode.BOTH), ("v2", LifecycleMode.DISAPPEAR)]

        router.scheduler.advance(0.3)

        settled = events[-1]
        assert settled.settled is True
        assert settled.trigger is Trigger.REPLACESTATE
        assert [(entry.view.id, entry.mode) for entry in settled.entries] == [
            ("v1", LifecycleMode.BOTH)
        ]

    def test_popstate(self, router: Router, events: list[RouterEvent]) -> None:
        router.navigate("v1", "/users/1")
        router.history.back()

        assert events[-1].trigger is Trigger.POPSTATE
        assert [view.id for view in router.state.views] == ["v1"]
        assert _modes(router) == [("v1", LifecycleMode.BOTH), ("v2", LifecycleMode.DISAPPEAR)]

    def test_foreign_entry_self_heals(self, router: Router, events: list[RouterEvent]) -> None:
        router.history.push({"not": "a view state"}, "/users/3")

        assert events[-1].trigger is Trigger.INIT
        assert [view.url for view in router.state.views] == ["http://localhost/users/3"]

    def test_updates_notify(self, router: Router, events: list[RouterEvent]) -> None:
        router.update_query_params("v1", {"q": "x"})
        router.update_props("v1", {"p": 1})
        router.set_active("v1")

        assert [event.trigger for event in events] == [Trigger.REPLACESTATE, Trigger.REPLACESTATE]

    def test_unsubscribe_and_dispose(self, router: Router) -> None:
        received: list[RouterEvent] = []
        unsubscribe = router.subscribe(received.append)
        unsubscribe()
        router.navigate("v1", "/users/1")
        assert received == []

        router.subscribe(received.append)
        router.dispose()
        router.navigate("v2", "/users/2")
        assert received == []


class TestRouterRendering:
    def test_view_stack(self, router: Router) -> None:
        router.navigate("v1", "/users/1", layout="modal")
        router.navigate("v2", "/users/2", target="_void")

        stack = router.view_stack()

        assert [view.component for view in stack.stacked] == ["Home", "User"]
        assert [view.component for view in stack.void] == ["User"]

    def test_transition_stack_excludes_void(self, router: Router) -> None:
        router.navigate("v1", "/users/2", target="_void")
        assert [view.view.id for view in router.transition_stack()] == ["v1"]

    def test_allocations(self, router: Router) -> None:
        router.navigate("v1", "/users/1")

        assert [a.vw for a in router.allocations(1000)] == [50, 50]
        assert [a.vw for a in router.allocations(1000, "start")] == [100, 0]
        assert [a.vw for a in router.allocations(1000, "end")] == [50, 50]

    def test_allocations_rejects_unknown_phase(self, router: Router) -> None:
        with pytest.raises(ValueError, match="phase"):
            router.allocations(1000, "middle")

    def test_visible_drops_oldest(self, router: Router) -> None:
        router.navigate("v1", "/users/1")
        router.navigate("v2", "/wide")

        visible = router.visible(1000)

        assert [(view.view.id, vw) for view, vw in visible] == [("v3", 100)]

    def test_visible_side_by_side(self, router: Router) -> None:
        router.navigate("v1", "/users/1")

        visible = router.visible(1000)

        assert [(view.component, vw) for view, vw in visible] == [("Home", 50), ("User", 50)]


class TestOpenViews:
    @pytest.fixture
    def typed_router(self) -> Router:
        counter = itertools.count(1)
        manifest = RouteManifest.from_dict(
            {
                "routes": [
                    {"path": "/", "component": "Home"},
                    {
                        "path": "/sections/[section]/articles/[id]",
                        "component": "Article",
                        "meta": {"type": "article"},
                    },
                    {"path": "/sections/[section]", "component": "Section", "meta": {"type": "section"}},
                ]
            }
        )
        router = Router(
            manifest,
            scheduler=ManualScheduler(),
            id_factory=lambda: f"v{next(counter)}",
        )
        router.navigate("v1", "/sections/sports")
        router.navigate("v2", "/sections/sports/articles/1")
        router.navigate("v3", "/sections/news/articles/2", append=True)
        return router

    def test_filters_by_type(self, typed_router: Router) -> None:
        articles = typed_router.open_views("article")

        assert [view.view.id for view in articles] == ["v3", "v4"]
        assert [view.params for view in articles] == [
            {"section": "sports", "id": "1"},
            {"section": "news", "id": "2"},
        ]
        assert [view.view.id for view in typed_router.open_views("section")] == ["v2"]
        assert typed_router.open_views("gallery") == []

    def test_partial_param_match(self, typed_router: Router) -> None:
        assert [v.view.id for v in typed_router.open_views("article", {"section": "news"})] == ["v4"]
        assert [v.view.id for v in typed_router.open_views("article", {"id": "1"})] == ["v3"]
        assert typed_router.open_views("article", {"section": "sports", "id": "2"}) == []

    def test_active_flag(self, typed_router: Router) -> None:
        assert [v.is_active for v in typed_router.open_views("article")] == [False, True]

        typed_router.set_active("v3")

        assert [v.is_active for v in typed_router.open_views("article")] == [True, False]
