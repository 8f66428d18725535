"""View contracts the presenters drive.

The Textual widgets in ``tripboard.tui`` implement these; tests use
recording fakes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import FilterType, SortType, UpdateType, UserAction
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import Waypoint

if TYPE_CHECKING:
    from tripboard.presenters.new_waypoint_presenter import NewWaypointPresenter
    from tripboard.presenters.trip_info import TripInfo
    from tripboard.presenters.waypoint_presenter import WaypointPresenter


DataChangeHandler = Callable[[UserAction, UpdateType, Waypoint], Awaitable[None]]
"""Called by child presenters to start a mutation."""

ModeChangeHandler = Callable[[], None]
"""Called by a child presenter right before it opens its editor."""


class WaypointView(Protocol):
    """One waypoint row with an inline editor."""

    def show_waypoint(
        self,
        waypoint: Waypoint,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
    ) -> None: ...

    def open_editor(self) -> None: ...

    def close_editor(self) -> None: ...

    def show_state(self, state: VisualState) -> None: ...

    def remove(self) -> object: ...


class NewWaypointView(Protocol):
    """The create form."""

    def show_draft(
        self,
        draft: Waypoint,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
    ) -> None: ...

    def show_state(self, state: VisualState) -> None: ...

    def remove(self) -> object: ...


class BoardView(Protocol):
    """Container for sort bar, messages and waypoint rows."""

    def show_loading(self) -> None: ...

    def show_error(self, message: str) -> None: ...

    def show_board(self, *, sort_type: SortType, empty_message: str | None) -> None: ...

    def clear_board(self) -> None: ...

    def set_blocked(self, blocked: bool) -> None: ...

    def mount_waypoint(self, presenter: "WaypointPresenter") -> WaypointView: ...

    def mount_new_waypoint(self, presenter: "NewWaypointPresenter") -> NewWaypointView: ...


@dataclass(frozen=True, slots=True)
class FilterOption:
    """One entry of the filter bar."""

    filter_type: FilterType
    count: int

    @property
    def is_disabled(self) -> bool:
        return self.count == 0


class FilterView(Protocol):
    def show_filters(self, options: Sequence[FilterOption], current: FilterType) -> None: ...


class TripInfoView(Protocol):
    def show_trip_info(self, info: "TripInfo | None") -> None: ...
