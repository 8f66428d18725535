"""Presenter for the create form."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import UpdateType, UserAction
from tripboard.models.visual_state import (
    CREATION_TRANSITIONS,
    VisualState,
    VisualStateMachine,
)
from tripboard.models.waypoint import Waypoint, blank_waypoint
from tripboard.presenters.views import DataChangeHandler, NewWaypointView


class NewWaypointPresenter:
    """Singleton presenter for the in-progress "new event" form.

    ``destroy`` is idempotent; ``on_destroy`` fires only when an open
    form is actually closed.
    """

    def __init__(
        self,
        *,
        mount_view: Callable[["NewWaypointPresenter"], NewWaypointView],
        on_data_change: DataChangeHandler,
        on_destroy: Callable[[], None],
    ) -> None:
        self._mount_view = mount_view
        self._on_data_change = on_data_change
        self._on_destroy = on_destroy
        self._view: NewWaypointView | None = None
        self._state = VisualStateMachine(CREATION_TRANSITIONS)

    @property
    def is_open(self) -> bool:
        return self._view is not None

    @property
    def state(self) -> VisualState:
        return self._state.state

    def init(self, destinations: Sequence[Destination], offers: Sequence[OfferGroup]) -> None:
        if self._view is not None:
            return
        self._state.reset()
        self._view = self._mount_view(self)
        self._view.show_draft(blank_waypoint(), destinations, offers)

    def destroy(self) -> None:
        if self._view is None:
            return
        self._view.remove()
        self._view = None
        self._state.reset()
        self._on_destroy()

    def cancel(self) -> None:
        self.destroy()

    def _set_state(self, target: VisualState) -> None:
        if self._view is None:
            return
        if target == VisualState.SAVING and self._state.state == VisualState.ABORTING:
            self._state.transition(VisualState.IDLE)
        self._state.transition(target)
        self._view.show_state(target)

    def set_saving(self) -> None:
        self._set_state(VisualState.SAVING)

    def set_aborting(self) -> None:
        self._set_state(VisualState.ABORTING)

    def dismiss_abort(self) -> None:
        if self._view is None or self._state.state != VisualState.ABORTING:
            return
        self._state.transition(VisualState.IDLE)
        self._view.show_state(VisualState.IDLE)

    async def submit(self, draft: Waypoint) -> None:
        await self._on_data_change(UserAction.ADD_WAYPOINT, UpdateType.MINOR, draft)
