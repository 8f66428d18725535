"""Enumerations shared by the store and presenters."""

from enum import Enum


class UpdateType(Enum):
    """How much of the board must be rebuilt after a change.

    Ordered by increasing scope, except INIT which marks the first load.
    """

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    INIT = "init"


class UserAction(Enum):
    """Mutation intents a user can trigger."""

    UPDATE_WAYPOINT = "update_waypoint"
    ADD_WAYPOINT = "add_waypoint"
    DELETE_WAYPOINT = "delete_waypoint"


class FilterType(Enum):
    """Which waypoints are visible."""

    EVERYTHING = "everything"
    FUTURE = "future"
    PRESENT = "present"
    PAST = "past"


class SortType(Enum):
    """Order of the visible waypoints."""

    DAY = "day"
    EVENT = "event"
    TIME = "time"
    PRICE = "price"
    OFFERS = "offers"


# Shown in the sort bar but cannot be chosen
DISABLED_SORT_TYPES: frozenset[SortType] = frozenset({SortType.EVENT, SortType.OFFERS})

DEFAULT_SORT_TYPE = SortType.DAY
DEFAULT_FILTER_TYPE = FilterType.EVERYTHING
