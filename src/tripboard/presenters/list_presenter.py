"""Presenter for the trip board.

Reconciles the waypoints store and the filter store with one presenter
per displayed waypoint. It is the single observer of both stores, the
orchestrator of every user mutation and the owner of the gate that keeps
those mutations from overlapping on screen.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import (
    DEFAULT_FILTER_TYPE,
    DEFAULT_SORT_TYPE,
    DISABLED_SORT_TYPES,
    FilterType,
    SortType,
    UpdateType,
    UserAction,
)
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import Waypoint
from tripboard.presenters.events import (
    BoardEvent,
    FilterChanged,
    Reflow,
    WaypointsChanged,
    classify,
)
from tripboard.presenters.gate import UiGate
from tripboard.presenters.new_waypoint_presenter import NewWaypointPresenter
from tripboard.presenters.pipeline import derive_display_list
from tripboard.presenters.views import BoardView
from tripboard.presenters.waypoint_presenter import WaypointPresenter

if TYPE_CHECKING:
    from tripboard.store.filter_store import FilterStore
    from tripboard.store.waypoints_store import WaypointsStore

logger = logging.getLogger(__name__)

EMPTY_LIST_MESSAGES: dict[FilterType, str] = {
    FilterType.EVERYTHING: "Click New Event to create your first point",
    FilterType.FUTURE: "There are no future events now",
    FilterType.PRESENT: "There are no present events now",
    FilterType.PAST: "There are no past events now",
}

LOAD_TIMEOUT_MESSAGE = "Failed to load the trip. Please try again later."

PENDING_STATES = frozenset({VisualState.SAVING, VisualState.DELETING})


class ListPresenter:
    """Board-level presenter.

    Args:
        view: Board view hosting the rows.
        waypoints_store: Source of waypoints and catalogs.
        filter_store: Source of the active filter.
        gate: Gate serializing mutations.
        on_new_waypoint_destroy: Called when the create form closes.
        load_timeout: Seconds to wait for INIT before showing an error.
            ``None`` disables the timeout.
    """

    def __init__(
        self,
        *,
        view: BoardView,
        waypoints_store: "WaypointsStore",
        filter_store: "FilterStore",
        gate: UiGate,
        on_new_waypoint_destroy: Callable[[], None],
        load_timeout: float | None = None,
    ) -> None:
        self._view = view
        self._waypoints_store = waypoints_store
        self._filter_store = filter_store
        self._gate = gate
        self._load_timeout = load_timeout
        self._load_timer: asyncio.TimerHandle | None = None

        self._waypoint_presenters: dict[str, WaypointPresenter] = {}
        self._new_waypoint_presenter = NewWaypointPresenter(
            mount_view=view.mount_new_waypoint,
            on_data_change=self.handle_view_action,
            on_destroy=on_new_waypoint_destroy,
        )
        self._sort_type = DEFAULT_SORT_TYPE
        self._is_loading = True
        self._load_timed_out = False

        self._waypoints_store.add_observer(self._on_waypoints_event)
        self._filter_store.add_observer(self._on_filter_event)

    # --- Derived state ---

    @property
    def waypoints(self) -> list[Waypoint]:
        """Waypoints to display, freshly derived on every access."""
        return derive_display_list(
            self._waypoints_store.waypoints,
            self._filter_store.filter,
            self._sort_type,
        )

    @property
    def destinations(self) -> list[Destination]:
        return self._waypoints_store.destinations

    @property
    def offers(self) -> list[OfferGroup]:
        return self._waypoints_store.offers

    @property
    def sort_type(self) -> SortType:
        return self._sort_type

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def waypoint_presenters(self) -> dict[str, WaypointPresenter]:
        """Live presenters by waypoint id (read-only view for callers)."""
        return dict(self._waypoint_presenters)

    @property
    def new_waypoint_presenter(self) -> NewWaypointPresenter:
        return self._new_waypoint_presenter

    # --- Entry points for the page owner ---

    def initialize(self) -> None:
        """Render the board (the loading view until INIT arrives)."""
        self._render_board()
        if self._is_loading and self._load_timeout is not None:
            loop = asyncio.get_running_loop()
            self._load_timer = loop.call_later(self._load_timeout, self._on_load_timeout)

    def create_waypoint(self) -> None:
        """Open the create form on a reset, unfiltered board."""
        self._sort_type = DEFAULT_SORT_TYPE
        self._filter_store.set_filter(UpdateType.MAJOR, DEFAULT_FILTER_TYPE)
        self._new_waypoint_presenter.init(self.destinations, self.offers)

    def handle_sort_type_change(self, sort_type: SortType) -> None:
        if sort_type == self._sort_type or sort_type in DISABLED_SORT_TYPES:
            return
        self._sort_type = sort_type
        self._clear_board()
        self._render_board()

    def handle_mode_change(self) -> None:
        """A child is about to open its editor: close every other surface."""
        self._new_waypoint_presenter.destroy()
        for presenter in self._waypoint_presenters.values():
            presenter.reset_view()

    # --- Action orchestration ---

    async def handle_view_action(
        self, action: UserAction, update_type: UpdateType, update: Waypoint
    ) -> None:
        """Run a user mutation with optimistic state and rollback.

        Failures never escape: they end as the ABORTING visual state.
        """
        async with self._gate.hold():
            if action == UserAction.ADD_WAYPOINT:
                await self._add_waypoint(update_type, update)
            elif action == UserAction.UPDATE_WAYPOINT:
                await self._update_waypoint(update_type, update)
            elif action == UserAction.DELETE_WAYPOINT:
                await self._delete_waypoint(update_type, update)
            else:
                raise ValueError(f"Unknown user action {action}")

    async def _add_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        creator = self._new_waypoint_presenter
        if not creator.is_open:
            logger.warning("Create form closed before saving; dropping new waypoint")
            return
        if creator.state == VisualState.SAVING:
            logger.warning("New waypoint is still being saved; ignoring resubmit")
            return
        creator.set_saving()
        try:
            await self._waypoints_store.add_waypoint(update_type, update)
        except Exception:
            logger.warning("Adding waypoint failed", exc_info=True)
            if creator.state != VisualState.SAVING:
                # The form was closed or reopened while the add was pending.
                logger.debug("Create form moved on; not showing the failed add")
                return
            creator.set_aborting()

    async def _update_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        presenter = self._pending_target(update.id)
        if presenter is None:
            return
        presenter.set_saving()
        try:
            await self._waypoints_store.update_waypoint(update_type, update)
        except Exception:
            logger.warning("Updating waypoint %s failed", update.id, exc_info=True)
            self._abort(presenter, update.id)

    async def _delete_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        presenter = self._pending_target(update.id)
        if presenter is None:
            return
        presenter.set_deleting()
        try:
            await self._waypoints_store.delete_waypoint(update_type, update)
        except Exception:
            logger.warning("Deleting waypoint %s failed", update.id, exc_info=True)
            self._abort(presenter, update.id)

    def _pending_target(self, waypoint_id: str) -> WaypointPresenter | None:
        presenter = self._waypoint_presenters.get(waypoint_id)
        if presenter is None:
            logger.warning("Waypoint %s is no longer displayed; action dropped", waypoint_id)
            return None
        if presenter.state in PENDING_STATES:
            logger.warning("Waypoint %s has an action in flight; action dropped", waypoint_id)
            return None
        return presenter

    def _abort(self, presenter: WaypointPresenter, waypoint_id: str) -> None:
        # A rebuild while the mutation was pending replaces the presenter.
        if (
            self._waypoint_presenters.get(waypoint_id) is not presenter
            or presenter.state not in PENDING_STATES
        ):
            logger.debug("Waypoint %s was re-rendered; not showing the failure", waypoint_id)
            return
        presenter.set_aborting()

    # --- Update dispatch ---

    def _on_waypoints_event(self, update_type: UpdateType, waypoint: Waypoint | None) -> None:
        self.dispatch(WaypointsChanged(update_type, waypoint))

    def _on_filter_event(self, update_type: UpdateType, filter_type: FilterType) -> None:
        self.dispatch(FilterChanged(update_type, filter_type))

    def dispatch(self, event: BoardEvent) -> None:
        """Apply the reflow ``event`` calls for."""
        reflow = classify(event)
        logger.debug("Dispatching %s as %s", event, reflow.value)
        if reflow == Reflow.FIRST_RENDER:
            self._finish_loading()
            self._clear_board()
            self._render_board()
        elif reflow == Reflow.REFRESH_ITEM:
            self._refresh_item(event)
        elif reflow == Reflow.REBUILD:
            self._clear_board()
            self._render_board()
        elif reflow == Reflow.REBUILD_RESET_SORT:
            self._clear_board(reset_sort_type=True)
            self._render_board()

    def _refresh_item(self, event: BoardEvent) -> None:
        waypoint = event.waypoint if isinstance(event, WaypointsChanged) else None
        if waypoint is None:
            return
        presenter = self._waypoint_presenters.get(waypoint.id)
        if presenter is None:
            logger.debug("Ignoring stale update for waypoint %s", waypoint.id)
            return
        presenter.init(waypoint, self.destinations, self.offers)

    # --- Loading ---

    def _finish_loading(self) -> None:
        self._is_loading = False
        self._load_timed_out = False
        if self._load_timer is not None:
            self._load_timer.cancel()
            self._load_timer = None

    def _on_load_timeout(self) -> None:
        self._load_timer = None
        if not self._is_loading:
            return
        logger.error("Trip did not load within %.1fs", self._load_timeout or 0.0)
        self._load_timed_out = True
        self._view.show_error(LOAD_TIMEOUT_MESSAGE)

    # --- Rendering ---

    def _render_waypoint(self, waypoint: Waypoint) -> None:
        presenter = WaypointPresenter(
            mount_view=self._view.mount_waypoint,
            on_mode_change=self.handle_mode_change,
            on_data_change=self.handle_view_action,
        )
        presenter.init(waypoint, self.destinations, self.offers)
        self._waypoint_presenters[waypoint.id] = presenter

    def _render_board(self) -> None:
        if self._is_loading:
            if self._load_timed_out:
                self._view.show_error(LOAD_TIMEOUT_MESSAGE)
            else:
                self._view.show_loading()
            return

        load_error = self._waypoints_store.load_error
        if load_error is not None:
            self._view.show_error(f"Failed to load the trip: {load_error}")
            return

        waypoints = self.waypoints
        empty_message = None
        if not waypoints:
            empty_message = EMPTY_LIST_MESSAGES[self._filter_store.filter]
        self._view.show_board(sort_type=self._sort_type, empty_message=empty_message)
        for waypoint in waypoints:
            self._render_waypoint(waypoint)

    def _clear_board(self, *, reset_sort_type: bool = False) -> None:
        for presenter in self._waypoint_presenters.values():
            presenter.destroy()
        self._waypoint_presenters.clear()
        self._new_waypoint_presenter.destroy()
        self._view.clear_board()
        if reset_sort_type:
            self._sort_type = DEFAULT_SORT_TYPE
