"""Presenter for a single waypoint row."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from enum import Enum

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import UpdateType, UserAction
from tripboard.models.visual_state import VisualState, VisualStateMachine
from tripboard.models.waypoint import Waypoint
from tripboard.presenters.views import DataChangeHandler, ModeChangeHandler, WaypointView

logger = logging.getLogger(__name__)


class Mode(Enum):
    DEFAULT = "default"
    EDITING = "editing"


def update_type_for(previous: Waypoint, updated: Waypoint) -> UpdateType:
    """Pick the reflow scope for an edit.

    Changing dates or price can move the waypoint in the sorted list or
    across filters, so the board is rebuilt. Anything else is patched in
    place.
    """
    if (
        previous.date_from != updated.date_from
        or previous.date_to != updated.date_to
        or previous.base_price != updated.base_price
    ):
        return UpdateType.MINOR
    return UpdateType.PATCH


class WaypointPresenter:
    """Owns one waypoint view and its visual state machine."""

    def __init__(
        self,
        *,
        mount_view: Callable[["WaypointPresenter"], WaypointView],
        on_mode_change: ModeChangeHandler,
        on_data_change: DataChangeHandler,
    ) -> None:
        self._mount_view = mount_view
        self._on_mode_change = on_mode_change
        self._on_data_change = on_data_change
        self._view: WaypointView | None = None
        self._waypoint: Waypoint | None = None
        self._destinations: Sequence[Destination] = ()
        self._offers: Sequence[OfferGroup] = ()
        self._mode = Mode.DEFAULT
        self._state = VisualStateMachine()

    @property
    def waypoint(self) -> Waypoint | None:
        return self._waypoint

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def state(self) -> VisualState:
        return self._state.state

    @property
    def destinations(self) -> Sequence[Destination]:
        return self._destinations

    @property
    def offers(self) -> Sequence[OfferGroup]:
        return self._offers

    def init(
        self,
        waypoint: Waypoint,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
    ) -> None:
        """Show ``waypoint``, mounting the view on first call.

        Fresh data supersedes any pending visual state and closes the editor.
        """
        self._waypoint = waypoint
        self._destinations = destinations
        self._offers = offers
        if self._view is None:
            self._view = self._mount_view(self)
        self._view.show_waypoint(waypoint, destinations, offers)
        if self._mode == Mode.EDITING:
            self._view.close_editor()
            self._mode = Mode.DEFAULT
        self._state.reset()
        self._view.show_state(VisualState.IDLE)

    def destroy(self) -> None:
        if self._view is None:
            return
        self._view.remove()
        self._view = None

    def reset_view(self) -> None:
        """Close the editor if it is open."""
        if self._view is None or self._mode == Mode.DEFAULT:
            return
        self._view.close_editor()
        self._mode = Mode.DEFAULT

    def open_editor(self) -> None:
        if self._view is None or self._mode == Mode.EDITING:
            return
        self._on_mode_change()
        self._view.open_editor()
        self._mode = Mode.EDITING

    # --- Visual states, driven by the list presenter ---

    def _set_state(self, target: VisualState) -> None:
        if self._view is None:
            return
        if target != VisualState.IDLE and self._state.state == VisualState.ABORTING:
            # Acting again counts as dismissing the previous failure.
            self._state.transition(VisualState.IDLE)
        self._state.transition(target)
        self._view.show_state(target)

    def set_saving(self) -> None:
        self._set_state(VisualState.SAVING)

    def set_deleting(self) -> None:
        self._set_state(VisualState.DELETING)

    def set_aborting(self) -> None:
        self._set_state(VisualState.ABORTING)

    def dismiss_abort(self) -> None:
        """Return from ABORTING to IDLE; called by the view."""
        if self._view is None or self._state.state != VisualState.ABORTING:
            return
        self._state.transition(VisualState.IDLE)
        self._view.show_state(VisualState.IDLE)

    # --- User intents, called by the view ---

    async def toggle_favorite(self) -> None:
        if self._waypoint is None:
            return
        await self._on_data_change(
            UserAction.UPDATE_WAYPOINT,
            UpdateType.PATCH,
            replace(self._waypoint, is_favorite=not self._waypoint.is_favorite),
        )

    async def submit(self, update: Waypoint) -> None:
        if self._waypoint is None:
            return
        await self._on_data_change(
            UserAction.UPDATE_WAYPOINT,
            update_type_for(self._waypoint, update),
            update,
        )

    async def delete(self) -> None:
        if self._waypoint is None:
            return
        await self._on_data_change(
            UserAction.DELETE_WAYPOINT,
            UpdateType.MINOR,
            self._waypoint,
        )
