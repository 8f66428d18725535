"""UI-agnostic presenters for the trip board."""

from .events import BoardEvent, FilterChanged, Reflow, WaypointsChanged, classify
from .filter_presenter import FilterPresenter
from .gate import UiGate
from .list_presenter import EMPTY_LIST_MESSAGES, ListPresenter
from .new_waypoint_presenter import NewWaypointPresenter
from .pipeline import count_by_filter, derive_display_list, filter_waypoints, sort_waypoints
from .trip_info import TripInfo, TripInfoPresenter, build_trip_info
from .waypoint_presenter import Mode, WaypointPresenter, update_type_for

__all__ = [
    "BoardEvent",
    "EMPTY_LIST_MESSAGES",
    "FilterChanged",
    "FilterPresenter",
    "ListPresenter",
    "Mode",
    "NewWaypointPresenter",
    "Reflow",
    "TripInfo",
    "TripInfoPresenter",
    "UiGate",
    "WaypointPresenter",
    "WaypointsChanged",
    "build_trip_info",
    "classify",
    "count_by_filter",
    "derive_display_list",
    "filter_waypoints",
    "sort_waypoints",
    "update_type_for",
]
