"""Tests for classifying board events into reflow scopes."""

from datetime import UTC, datetime

import pytest

from tripboard.models.types import FilterType, UpdateType
from tripboard.models.waypoint import Waypoint, WaypointType
from tripboard.presenters.events import (
    FILTER_REFLOW,
    WAYPOINTS_REFLOW,
    FilterChanged,
    Reflow,
    WaypointsChanged,
    classify,
)

WAYPOINT = Waypoint(
    id="w1",
    type=WaypointType.BUS,
    base_price=10,
    date_from=datetime(2030, 1, 1, tzinfo=UTC),
    date_to=datetime(2030, 1, 2, tzinfo=UTC),
)


def test_every_update_type_is_classified_for_both_sources() -> None:
    for update_type in UpdateType:
        assert update_type in WAYPOINTS_REFLOW
        assert update_type in FILTER_REFLOW


@pytest.mark.parametrize(
    ("update_type", "expected"),
    [
        (UpdateType.INIT, Reflow.FIRST_RENDER),
        (UpdateType.PATCH, Reflow.REFRESH_ITEM),
        (UpdateType.MINOR, Reflow.REBUILD),
        (UpdateType.MAJOR, Reflow.REBUILD_RESET_SORT),
    ],
)
def test_waypoint_events(update_type: UpdateType, expected: Reflow) -> None:
    assert classify(WaypointsChanged(update_type, WAYPOINT)) == expected


def test_patch_without_waypoint_rebuilds() -> None:
    assert classify(WaypointsChanged(UpdateType.PATCH)) == Reflow.REBUILD


def test_filter_events_never_refresh_a_single_item() -> None:
    assert classify(FilterChanged(UpdateType.MAJOR, FilterType.PAST)) == Reflow.REBUILD_RESET_SORT
    assert classify(FilterChanged(UpdateType.PATCH, FilterType.PAST)) == Reflow.REBUILD
    assert classify(FilterChanged(UpdateType.INIT, FilterType.PAST)) == Reflow.REBUILD
