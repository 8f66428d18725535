"""Parsing and validation of the waypoint editor fields."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from tripboard.models.catalog import Destination, OfferGroup, find_destination, offers_for_type
from tripboard.models.waypoint import Waypoint, WaypointType

DATE_INPUT_FORMAT = "%Y-%m-%d %H:%M"


class FormError(ValueError):
    """Raised when editor input cannot be turned into a waypoint."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(message)


@dataclass
class WaypointForm:
    """Raw editor values as typed by the user."""

    type: str
    destination: str | None
    date_from: str
    date_to: str
    base_price: str
    offers: tuple[str, ...] = field(default_factory=tuple)
    is_favorite: bool = False


def format_input_datetime(value: datetime) -> str:
    """Render a datetime the way the editor expects it back."""
    return value.astimezone(UTC).strftime(DATE_INPUT_FORMAT)


def _parse_input_datetime(raw: str, field_name: str) -> datetime:
    try:
        return datetime.strptime(raw.strip(), DATE_INPUT_FORMAT).replace(tzinfo=UTC)
    except ValueError as e:
        raise FormError(field_name, "Use the YYYY-MM-DD HH:MM format") from e


def form_from_waypoint(waypoint: Waypoint) -> WaypointForm:
    """Pre-fill editor values from an existing waypoint."""
    return WaypointForm(
        type=waypoint.type.value,
        destination=waypoint.destination,
        date_from=format_input_datetime(waypoint.date_from),
        date_to=format_input_datetime(waypoint.date_to),
        base_price=str(waypoint.base_price),
        offers=waypoint.offers,
        is_favorite=waypoint.is_favorite,
    )


def parse_waypoint_form(
    form: WaypointForm,
    *,
    base: Waypoint,
    destinations: Sequence[Destination],
    offers: Iterable[OfferGroup],
) -> Waypoint:
    """Build the waypoint the editor describes.

    ``base`` supplies the id (empty for new waypoints). Offers that do not
    belong to the chosen type are dropped.

    Raises:
        FormError: If any field is invalid.
    """
    try:
        waypoint_type = WaypointType(form.type)
    except ValueError as e:
        raise FormError("type", f"Unknown event type {form.type!r}") from e

    if find_destination(destinations, form.destination) is None:
        raise FormError("destination", "Choose a destination from the list")

    date_from = _parse_input_datetime(form.date_from, "date_from")
    date_to = _parse_input_datetime(form.date_to, "date_to")
    if date_to < date_from:
        raise FormError("date_to", "The end must not be before the start")

    raw_price = form.base_price.strip()
    if not raw_price.isdigit():
        raise FormError("base_price", "Price must be a whole non-negative number")

    available = {offer.id for offer in offers_for_type(offers, waypoint_type.value)}
    return replace(
        base,
        type=waypoint_type,
        destination=form.destination,
        date_from=date_from,
        date_to=date_to,
        base_price=int(raw_price),
        offers=tuple(offer_id for offer_id in form.offers if offer_id in available),
        is_favorite=form.is_favorite,
    )
