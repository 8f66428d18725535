"""Waypoint data model for a trip."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Self


class WaypointType(Enum):
    """Kind of trip event."""

    TAXI = "taxi"
    BUS = "bus"
    TRAIN = "train"
    SHIP = "ship"
    DRIVE = "drive"
    FLIGHT = "flight"
    CHECK_IN = "check-in"
    SIGHTSEEING = "sightseeing"
    RESTAURANT = "restaurant"


def _parse_datetime(raw: str | datetime) -> datetime:
    value = raw if isinstance(raw, datetime) else datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


@dataclass(frozen=True, slots=True)
class Waypoint:
    """A single point of the trip.

    Instances are immutable; changes are made by building a new waypoint
    (``dataclasses.replace``) and handing it to the store.
    """

    id: str
    type: WaypointType
    base_price: int
    date_from: datetime
    date_to: datetime
    destination: str | None = None
    offers: tuple[str, ...] = field(default_factory=tuple)
    is_favorite: bool = False

    @property
    def duration(self) -> timedelta:
        """Time between start and end."""
        return self.date_to - self.date_from

    @property
    def is_new(self) -> bool:
        """True for drafts that the backend has not assigned an id to yet."""
        return not self.id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "base_price": self.base_price,
            "date_from": self.date_from.isoformat(),
            "date_to": self.date_to.isoformat(),
            "destination": self.destination,
            "offers": list(self.offers),
            "is_favorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        destination = data.get("destination")
        return cls(
            id=str(data.get("id", "")),
            type=WaypointType(data.get("type", WaypointType.FLIGHT.value)),
            base_price=int(data.get("base_price", 0)),
            date_from=_parse_datetime(data["date_from"]),
            date_to=_parse_datetime(data["date_to"]),
            destination=str(destination) if destination is not None else None,
            offers=tuple(str(offer_id) for offer_id in data.get("offers", [])),
            is_favorite=bool(data.get("is_favorite", False)),
        )


def blank_waypoint(now: datetime | None = None) -> Waypoint:
    """Draft used to pre-fill the create form."""
    start = (now or datetime.now(UTC)).replace(second=0, microsecond=0)
    return Waypoint(
        id="",
        type=WaypointType.FLIGHT,
        base_price=0,
        date_from=start,
        date_to=start,
    )
