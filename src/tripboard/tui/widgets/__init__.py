"""Textual widgets implementing the presenter view contracts."""

from .board import EventsBoard
from .filter_bar import FilterBar
from .new_waypoint_form import NewWaypointForm
from .sort_bar import SortBar
from .trip_header import TripInfoHeader
from .waypoint_editor import WaypointEditor
from .waypoint_item import WaypointItem

__all__ = [
    "EventsBoard",
    "FilterBar",
    "NewWaypointForm",
    "SortBar",
    "TripInfoHeader",
    "WaypointEditor",
    "WaypointItem",
]
