"""Data models for Tripboard."""

from .catalog import (
    Destination,
    Offer,
    OfferGroup,
    Picture,
    find_destination,
    offers_for_type,
    selected_offers,
)
from .types import (
    DEFAULT_FILTER_TYPE,
    DEFAULT_SORT_TYPE,
    DISABLED_SORT_TYPES,
    FilterType,
    SortType,
    UpdateType,
    UserAction,
)
from .visual_state import (
    CREATION_TRANSITIONS,
    WAYPOINT_TRANSITIONS,
    InvalidVisualTransitionError,
    VisualState,
    VisualStateMachine,
)
from .waypoint import Waypoint, WaypointType, blank_waypoint

__all__ = [
    "CREATION_TRANSITIONS",
    "DEFAULT_FILTER_TYPE",
    "DEFAULT_SORT_TYPE",
    "DISABLED_SORT_TYPES",
    "Destination",
    "FilterType",
    "InvalidVisualTransitionError",
    "Offer",
    "OfferGroup",
    "Picture",
    "SortType",
    "UpdateType",
    "UserAction",
    "VisualState",
    "VisualStateMachine",
    "WAYPOINT_TRANSITIONS",
    "Waypoint",
    "WaypointType",
    "blank_waypoint",
    "find_destination",
    "offers_for_type",
    "selected_offers",
]
