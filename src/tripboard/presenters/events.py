"""Board events and their classification into reflow scopes.

The board listens to two sources. Each source wraps its notification in
its own event type; ``classify`` maps every (source, update type) pair
through an explicit table to the reflow the board must perform.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from tripboard.models.types import FilterType, UpdateType
from tripboard.models.waypoint import Waypoint


class Reflow(Enum):
    """Amount of board rebuilding an event requires."""

    FIRST_RENDER = "first_render"
    REFRESH_ITEM = "refresh_item"
    REBUILD = "rebuild"
    REBUILD_RESET_SORT = "rebuild_reset_sort"


@dataclass(frozen=True, slots=True)
class WaypointsChanged:
    """Notification from the waypoints store."""

    update_type: UpdateType
    waypoint: Waypoint | None = None


@dataclass(frozen=True, slots=True)
class FilterChanged:
    """Notification from the filter store."""

    update_type: UpdateType
    filter_type: FilterType


BoardEvent: TypeAlias = WaypointsChanged | FilterChanged


WAYPOINTS_REFLOW: dict[UpdateType, Reflow] = {
    UpdateType.INIT: Reflow.FIRST_RENDER,
    UpdateType.PATCH: Reflow.REFRESH_ITEM,
    UpdateType.MINOR: Reflow.REBUILD,
    UpdateType.MAJOR: Reflow.REBUILD_RESET_SORT,
}

# A filter change never targets a single waypoint and never means "loaded".
FILTER_REFLOW: dict[UpdateType, Reflow] = {
    UpdateType.INIT: Reflow.REBUILD,
    UpdateType.PATCH: Reflow.REBUILD,
    UpdateType.MINOR: Reflow.REBUILD,
    UpdateType.MAJOR: Reflow.REBUILD_RESET_SORT,
}


def classify(event: BoardEvent) -> Reflow:
    """Decide how much of the board ``event`` invalidates."""
    if isinstance(event, FilterChanged):
        return FILTER_REFLOW[event.update_type]
    reflow = WAYPOINTS_REFLOW[event.update_type]
    if reflow == Reflow.REFRESH_ITEM and event.waypoint is None:
        # Nothing to refresh in place; rebuild instead.
        return Reflow.REBUILD
    return reflow
