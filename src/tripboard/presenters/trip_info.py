"""Trip summary shown in the header."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tripboard.formatting import format_trip_date
from tripboard.models.catalog import Destination, OfferGroup, find_destination, selected_offers
from tripboard.models.types import SortType, UpdateType
from tripboard.models.waypoint import Waypoint
from tripboard.presenters.pipeline import sort_waypoints
from tripboard.presenters.views import TripInfoView

if TYPE_CHECKING:
    from tripboard.store.waypoints_store import WaypointsStore

MAX_ROUTE_STOPS = 3


@dataclass(frozen=True, slots=True)
class TripInfo:
    """Route, dates and total cost of the trip."""

    title: str
    dates: str
    total_cost: int


def waypoint_cost(waypoint: Waypoint, offers: Sequence[OfferGroup]) -> int:
    """Base price plus every selected offer."""
    extras = selected_offers(offers, waypoint.type.value, waypoint.offers)
    return waypoint.base_price + sum(offer.price for offer in extras)


def build_trip_info(
    waypoints: Sequence[Waypoint],
    destinations: Sequence[Destination],
    offers: Sequence[OfferGroup],
) -> TripInfo | None:
    """Summarize the whole trip, or None when it is empty.

    The route lists every destination in travel order when there are at
    most three of them, otherwise the first and last joined by an ellipsis.
    """
    if not waypoints:
        return None
    ordered = sort_waypoints(waypoints, SortType.DAY)
    names = []
    for waypoint in ordered:
        destination = find_destination(destinations, waypoint.destination)
        names.append(destination.name if destination else "?")
    if len(names) > MAX_ROUTE_STOPS:
        title = f"{names[0]} — ... — {names[-1]}"
    else:
        title = " — ".join(names)
    start = ordered[0].date_from
    end = max(waypoint.date_to for waypoint in ordered)
    return TripInfo(
        title=title,
        dates=f"{format_trip_date(start)} — {format_trip_date(end)}",
        total_cost=sum(waypoint_cost(waypoint, offers) for waypoint in ordered),
    )


class TripInfoPresenter:
    """Re-renders the header whenever the trip changes."""

    def __init__(self, *, view: TripInfoView, waypoints_store: "WaypointsStore") -> None:
        self._view = view
        self._waypoints_store = waypoints_store
        self._waypoints_store.add_observer(self._handle_model_event)

    def init(self) -> None:
        store = self._waypoints_store
        self._view.show_trip_info(
            build_trip_info(store.waypoints, store.destinations, store.offers)
        )

    def _handle_model_event(self, update_type: UpdateType, payload: Any) -> None:
        del update_type, payload
        self.init()
