"""Reference catalogs: destinations and offers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Self


@dataclass(frozen=True, slots=True)
class Picture:
    """A destination photo."""

    src: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"src": self.src, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(src=data["src"], description=data.get("description", ""))


@dataclass(frozen=True, slots=True)
class Destination:
    """A place a waypoint can lead to."""

    id: str
    name: str
    description: str = ""
    pictures: tuple[Picture, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pictures": [picture.to_dict() for picture in self.pictures],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data.get("description", ""),
            pictures=tuple(
                Picture.from_dict(picture) for picture in data.get("pictures", [])
            ),
        )


@dataclass(frozen=True, slots=True)
class Offer:
    """An add-on that can be selected for a waypoint."""

    id: str
    title: str
    price: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "price": self.price}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(id=str(data["id"]), title=data["title"], price=int(data["price"]))


@dataclass(frozen=True, slots=True)
class OfferGroup:
    """All offers available for one waypoint type."""

    type: str
    offers: tuple[Offer, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "offers": [offer.to_dict() for offer in self.offers]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            type=data["type"],
            offers=tuple(Offer.from_dict(offer) for offer in data.get("offers", [])),
        )


def find_destination(
    destinations: Iterable[Destination], destination_id: str | None
) -> Destination | None:
    """Return the destination with the given id, if any."""
    if destination_id is None:
        return None
    for destination in destinations:
        if destination.id == destination_id:
            return destination
    return None


def offers_for_type(offer_groups: Iterable[OfferGroup], waypoint_type: str) -> tuple[Offer, ...]:
    """Return the offers available for a waypoint type (empty if none)."""
    for group in offer_groups:
        if group.type == waypoint_type:
            return group.offers
    return ()


def selected_offers(
    offer_groups: Iterable[OfferGroup], waypoint_type: str, offer_ids: Iterable[str]
) -> tuple[Offer, ...]:
    """Return the offers of ``waypoint_type`` whose ids are in ``offer_ids``."""
    wanted = set(offer_ids)
    return tuple(
        offer for offer in offers_for_type(offer_groups, waypoint_type) if offer.id in wanted
    )
