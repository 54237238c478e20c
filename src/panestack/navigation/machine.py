"""Navigation state machine over the view stack.

Every operation reads the latest committed record from the history
store, computes one new ``ViewState``, and commits it with a single push
or replace.  Structural changes to the stack are pushes (a new back-button
step); focus and in-place updates are replaces.

Navigation policies, in the order ``navigate`` applies them:

1. no-op: the target URL is already the active view
2. takeover (``_top``): collapse the stack to one view
3. focus: the target URL is already open; make it active
4. append (``append=True`` or ``_void``): add at the end of the stack
5. push: drop every view after the origin view, then add
"""

import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from urllib.parse import urljoin, urlsplit

from panestack.config import RouterConfig
from panestack.href import Params, Scalar, merge_query, parse_search, stringify_params
from panestack.navigation.history import HistoryStore
from panestack.navigation.types import Target, Trigger, ViewDef, ViewState, is_valid_record
from panestack.routing.registry import RouteRegistry
from panestack.transitions.diff import params_are_equal

logger = logging.getLogger("panestack.navigation")


def _new_id() -> str:
    return str(uuid.uuid4())


class NavigationStateMachine:
    """Owns the persisted view state and the operations that change it.

    Args:
        registry: Used for base-path-aware URL construction.
        history: Host history store holding the persisted record.
        config: Supplies the fallback origin for canonical URLs.
        id_factory: Produces new view ids (``uuid4`` by default).
    """

    __slots__ = ("_config", "_history", "_id_factory", "_registry")

    def __init__(
        self,
        registry: RouteRegistry,
        history: HistoryStore,
        config: RouterConfig | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._registry = registry
        self._history = history
        self._config = config or RouterConfig()
        self._id_factory = id_factory or _new_id

    # -- State -------------------------------------------------------------

    @property
    def state(self) -> ViewState:
        return self.load()

    def load(self) -> ViewState:
        """Read the latest committed state.

        A missing or malformed record is replaced by a single view built
        from the current location and committed with trigger ``init``.
        """
        record = self._history.current()
        if is_valid_record(record):
            return ViewState.from_record(record)
        return self._bootstrap()

    def _bootstrap(self) -> ViewState:
        url = self._history.location
        view_id = self._id_factory()
        state = ViewState(
            active_id=view_id,
            views=(ViewDef(id=view_id, url=url, query_params=parse_search(urlsplit(url).query)),),
        )
        logger.info("No valid view state in history; starting fresh at %s", url)
        self._history.replace(state.to_record(), url, trigger=Trigger.INIT)
        return state

    def _origin(self) -> str:
        parts = urlsplit(self._history.location)
        if parts.scheme and parts.netloc:
            return f"{parts.scheme}://{parts.netloc}"
        return self._config.origin

    def canonical_url(self, path: str, query_params: Mapping[str, Scalar] | None = None) -> str:
        """Build the absolute URL a view at *path* is stored under."""
        url = urljoin(self._origin(), self._registry.get_full_path(path))
        if query_params:
            url = merge_query(url, query_params)
        return url

    # -- Commits -----------------------------------------------------------

    def _push(self, state: ViewState, url: str) -> ViewState:
        logger.debug("Push %s (%d views, active %s)", url, len(state.views), state.active_id)
        self._history.push(state.to_record(), url)
        return state

    def _replace(self, state: ViewState, url: str) -> ViewState:
        logger.debug("Replace %s (%d views, active %s)", url, len(state.views), state.active_id)
        self._history.replace(state.to_record(), url)
        return state

    # -- Operations --------------------------------------------------------

    def navigate(
        self,
        from_view_id: str | None,
        target_path: str,
        query_params: Mapping[str, Scalar] | None = None,
        *,
        append: bool = False,
        target: Target | str | None = None,
        props: Mapping[str, Scalar] | None = None,
        layout: str | None = None,
    ) -> ViewState | None:
        """Navigate from *from_view_id* to *target_path*.

        Args:
            from_view_id: The view the navigation originates from.  A
                default push discards every view stacked after it.
            target_path: Route path, optionally with its own query string.
            query_params: Set on the URL, overriding same-named keys.
            append: Add at the end of the stack instead of branching.
            target: ``_top`` takes over the stack, ``_void`` appends
                off the visible stack.
            props: Opaque payload stored on a newly created view.
            layout: Layout variant key for a newly created view.

        Returns:
            The committed state, or ``None`` when the navigation was a no-op.
        """
        state = self.state
        target = Target(target) if target else None
        params: Params = dict(query_params or {})
        url = self.canonical_url(target_path, params)
        existing = state.find_by_url(url)

        is_active = existing is not None and existing.id == state.active_id
        if target is not Target.TOP and not append and is_active:
            logger.debug("Navigation to active view %s ignored", url)
            return None

        def new_view() -> ViewDef:
            return ViewDef(
                id=self._id_factory(),
                url=url,
                query_params=params,
                props=dict(props or {}),
                layout=layout,
                target=target,
            )

        if not append:
            if target is Target.TOP:
                view = existing if existing is not None else new_view()
                return self._push(ViewState(active_id=view.id, views=(view,)), url)

            if existing is not None:
                return self._replace(ViewState(active_id=existing.id, views=state.views), url)

        if append or target is Target.VOID:
            view = new_view()
            return self._push(ViewState(active_id=view.id, views=(*state.views, view)), url)

        view = new_view()
        kept = state.views[: state.index_of(from_view_id) + 1]
        return self._push(ViewState(active_id=view.id, views=(*kept, view)), url)

    def close(self, view_id: str) -> ViewState | None:
        """Remove *view_id* from the stack; the new last view becomes active.

        Returns ``None`` when no such view is open.
        """
        state = self.state
        if state.find(view_id) is None:
            logger.debug("Close of unknown view %s ignored", view_id)
            return None
        views = tuple(view for view in state.views if view.id != view_id)
        last = views[-1] if views else None
        new_state = ViewState(active_id=last.id if last else "", views=views)
        return self._replace(new_state, last.url if last else "")

    def set_active(self, view_id: str) -> ViewState | None:
        """Focus an open view without changing the stack.

        Returns ``None`` when the view is unknown or already active.
        """
        state = self.state
        if state.active_id == view_id:
            return None
        view = state.find(view_id)
        if view is None:
            return None
        return self._replace(ViewState(active_id=view.id, views=state.views), view.url)

    def update_query_params(
        self,
        view_id: str,
        query_params: Mapping[str, Scalar],
        replace_all: bool = False,
    ) -> ViewState | None:
        """Merge (or with *replace_all*, replace) a view's query params.

        The view URL's query string is rewritten to match.  Nothing is
        committed when the resulting params equal the current ones.
        """
        state = self.state
        view = state.find(view_id)
        if view is None:
            return None
        updated: Params = dict(query_params) if replace_all else {**view.query_params, **query_params}
        if params_are_equal(view.query_params, updated):
            return None
        url = urlsplit(view.url)._replace(query=stringify_params(updated)).geturl()
        return self._commit_view(state, replace(view, query_params=updated, url=url))

    def update_props(
        self,
        view_id: str,
        props: Mapping[str, Scalar],
        replace_all: bool = False,
    ) -> ViewState | None:
        """Merge (or with *replace_all*, replace) a view's props.

        Nothing is committed when the resulting props equal the current ones.
        """
        state = self.state
        view = state.find(view_id)
        if view is None:
            return None
        updated: Params = dict(props) if replace_all else {**view.props, **props}
        if params_are_equal(view.props, updated):
            return None
        return self._commit_view(state, replace(view, props=updated))

    def _commit_view(self, state: ViewState, updated: ViewDef) -> ViewState:
        views = tuple(updated if view.id == updated.id else view for view in state.views)
        new_state = ViewState(active_id=state.active_id, views=views)
        active = new_state.active_view
        return self._replace(new_state, active.url if active is not None else updated.url)
