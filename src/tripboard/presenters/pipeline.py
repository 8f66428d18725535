"""Derivation of the displayed waypoint list.

Filtering runs before sorting and both work on a copy, so the store's
collection is never reordered. Python's sort is stable: waypoints with
equal keys keep their collection order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from typing import TypeAlias

from tripboard.models.types import FilterType, SortType
from tripboard.models.waypoint import Waypoint

WaypointFilter: TypeAlias = Callable[[Sequence[Waypoint], datetime], list[Waypoint]]


def _is_future(waypoint: Waypoint, now: datetime) -> bool:
    return waypoint.date_from > now


def _is_present(waypoint: Waypoint, now: datetime) -> bool:
    return waypoint.date_from <= now <= waypoint.date_to


def _is_past(waypoint: Waypoint, now: datetime) -> bool:
    return waypoint.date_to < now


FILTERS: dict[FilterType, WaypointFilter] = {
    FilterType.EVERYTHING: lambda waypoints, now: list(waypoints),
    FilterType.FUTURE: lambda waypoints, now: [w for w in waypoints if _is_future(w, now)],
    FilterType.PRESENT: lambda waypoints, now: [w for w in waypoints if _is_present(w, now)],
    FilterType.PAST: lambda waypoints, now: [w for w in waypoints if _is_past(w, now)],
}


def filter_waypoints(
    waypoints: Sequence[Waypoint], filter_type: FilterType, now: datetime | None = None
) -> list[Waypoint]:
    """Return the waypoints matching ``filter_type`` in collection order."""
    return FILTERS[filter_type](waypoints, now or datetime.now(UTC))


def sort_waypoints(waypoints: Iterable[Waypoint], sort_type: SortType) -> list[Waypoint]:
    """Return a sorted copy.

    DAY sorts by start ascending, TIME by duration descending, PRICE by
    price descending. Sort types that cannot be selected fall back to DAY.
    """
    if sort_type == SortType.TIME:
        return sorted(waypoints, key=lambda w: w.duration, reverse=True)
    if sort_type == SortType.PRICE:
        return sorted(waypoints, key=lambda w: w.base_price, reverse=True)
    return sorted(waypoints, key=lambda w: w.date_from)


def derive_display_list(
    waypoints: Sequence[Waypoint],
    filter_type: FilterType,
    sort_type: SortType,
    now: datetime | None = None,
) -> list[Waypoint]:
    """Filter then sort. Pure: identical inputs give identical output."""
    return sort_waypoints(filter_waypoints(waypoints, filter_type, now), sort_type)


def count_by_filter(
    waypoints: Sequence[Waypoint], now: datetime | None = None
) -> dict[FilterType, int]:
    """How many waypoints each filter would show."""
    moment = now or datetime.now(UTC)
    return {
        filter_type: len(apply(waypoints, moment))
        for filter_type, apply in FILTERS.items()
    }
