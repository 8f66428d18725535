"""Tests for the filter bar presenter."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from tripboard.models.types import FilterType, UpdateType
from tripboard.models.waypoint import Waypoint, WaypointType
from tripboard.presenters.filter_presenter import FilterPresenter
from tripboard.presenters.views import FilterOption
from tripboard.store.backend import InMemoryTripBackend
from tripboard.store.filter_store import FilterStore
from tripboard.store.waypoints_store import WaypointsStore


class _RecordingView:
    def __init__(self) -> None:
        self.renders: list[tuple[list[FilterOption], FilterType]] = []

    def show_filters(self, options: list[FilterOption], current: FilterType) -> None:
        self.renders.append((options, current))


def _presenter() -> tuple[FilterPresenter, FilterStore, _RecordingView, list[UpdateType]]:
    start = datetime.now(UTC) + timedelta(days=10)
    future = Waypoint(
        id="f",
        type=WaypointType.BUS,
        base_price=5,
        date_from=start,
        date_to=start + timedelta(hours=1),
    )
    waypoints_store = WaypointsStore(InMemoryTripBackend(waypoints=[future]))
    asyncio.run(waypoints_store.init())
    filter_store = FilterStore()
    updates: list[UpdateType] = []
    filter_store.add_observer(lambda update_type, payload: updates.append(update_type))
    view = _RecordingView()
    presenter = FilterPresenter(
        view=view, filter_store=filter_store, waypoints_store=waypoints_store
    )
    return presenter, filter_store, view, updates


def test_empty_filters_are_disabled() -> None:
    presenter, _, view, _ = _presenter()
    presenter.init()

    options, current = view.renders[-1]
    disabled = {option.filter_type for option in options if option.is_disabled}
    assert current == FilterType.EVERYTHING
    assert disabled == {FilterType.PRESENT, FilterType.PAST}


def test_changing_filter_is_a_major_update() -> None:
    presenter, filter_store, view, updates = _presenter()

    presenter.handle_filter_type_change(FilterType.FUTURE)

    assert filter_store.filter == FilterType.FUTURE
    assert updates == [UpdateType.MAJOR]
    assert view.renders[-1][1] == FilterType.FUTURE


def test_choosing_current_filter_is_ignored() -> None:
    presenter, _, _, updates = _presenter()
    presenter.handle_filter_type_change(FilterType.EVERYTHING)
    assert updates == []
