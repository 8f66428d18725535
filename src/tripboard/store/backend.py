"""Persistence backends for trip data.

The store talks to a backend through the ``TripBackend`` protocol. Two
implementations ship: an in-memory one (optionally slow or flaky, to
exercise the board's optimistic states) and a YAML file backend.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any, Protocol

import yaml

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.waypoint import Waypoint

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when the backend rejects or fails an operation."""


class TripBackend(Protocol):
    """Asynchronous access to the persisted trip."""

    async def get_waypoints(self) -> list[Waypoint]: ...

    async def get_destinations(self) -> list[Destination]: ...

    async def get_offers(self) -> list[OfferGroup]: ...

    async def add_waypoint(self, waypoint: Waypoint) -> Waypoint: ...

    async def update_waypoint(self, waypoint: Waypoint) -> Waypoint: ...

    async def delete_waypoint(self, waypoint_id: str) -> None: ...


class InMemoryTripBackend:
    """Backend keeping everything in memory.

    Args:
        waypoints: Initial waypoints.
        destinations: Destination catalog.
        offers: Offer catalog.
        latency: Seconds every call sleeps before answering.
        failure_rate: Probability (0..1) that a mutation is rejected.
        rng: Random source used for ``failure_rate``.
    """

    def __init__(
        self,
        *,
        waypoints: Iterable[Waypoint] = (),
        destinations: Iterable[Destination] = (),
        offers: Iterable[OfferGroup] = (),
        latency: float = 0.0,
        failure_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self._waypoints: list[Waypoint] = list(waypoints)
        self._destinations: list[Destination] = list(destinations)
        self._offers: list[OfferGroup] = list(offers)
        self.latency = latency
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()

    async def _simulate(self, operation: str, *, mutating: bool = False) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)
        if mutating and self.failure_rate > 0 and self._rng.random() < self.failure_rate:
            logger.info("Simulated failure for %s", operation)
            raise BackendError(f"Simulated failure for {operation}")

    def _commit(self, waypoints: list[Waypoint]) -> None:
        self._persist(waypoints)
        self._waypoints = waypoints

    def _index_of(self, waypoint_id: str) -> int:
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.id == waypoint_id:
                return index
        raise BackendError(f"Unknown waypoint {waypoint_id}")

    async def get_waypoints(self) -> list[Waypoint]:
        await self._simulate("get_waypoints")
        return list(self._waypoints)

    async def get_destinations(self) -> list[Destination]:
        await self._simulate("get_destinations")
        return list(self._destinations)

    async def get_offers(self) -> list[OfferGroup]:
        await self._simulate("get_offers")
        return list(self._offers)

    async def add_waypoint(self, waypoint: Waypoint) -> Waypoint:
        await self._simulate("add_waypoint", mutating=True)
        created = replace(waypoint, id=uuid.uuid4().hex[:12])
        self._commit([*self._waypoints, created])
        return created

    async def update_waypoint(self, waypoint: Waypoint) -> Waypoint:
        await self._simulate("update_waypoint", mutating=True)
        index = self._index_of(waypoint.id)
        waypoints = list(self._waypoints)
        waypoints[index] = waypoint
        self._commit(waypoints)
        return waypoint

    async def delete_waypoint(self, waypoint_id: str) -> None:
        await self._simulate("delete_waypoint", mutating=True)
        index = self._index_of(waypoint_id)
        waypoints = list(self._waypoints)
        del waypoints[index]
        self._commit(waypoints)

    def _persist(self, waypoints: list[Waypoint]) -> None:
        """Hook for subclasses that write ``waypoints`` somewhere before they are kept."""

    def _document(self, waypoints: list[Waypoint]) -> dict[str, Any]:
        return {
            "destinations": [destination.to_dict() for destination in self._destinations],
            "offers": [group.to_dict() for group in self._offers],
            "waypoints": [waypoint.to_dict() for waypoint in waypoints],
        }

    def to_dict(self) -> dict[str, Any]:
        """Full trip document."""
        return self._document(self._waypoints)


def load_trip_document(path: Path) -> dict[str, Any]:
    """Read a trip YAML document.

    Raises:
        BackendError: If the file cannot be read or is not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise BackendError(f"Cannot read trip file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BackendError(f"Trip file {path} must contain a mapping")
    return data


class YamlTripBackend(InMemoryTripBackend):
    """In-memory backend that writes every change back to a YAML file."""

    def __init__(self, path: Path, **kwargs: Any) -> None:
        data = load_trip_document(path)
        try:
            super().__init__(
                waypoints=[Waypoint.from_dict(item) for item in data.get("waypoints", [])],
                destinations=[
                    Destination.from_dict(item) for item in data.get("destinations", [])
                ],
                offers=[OfferGroup.from_dict(item) for item in data.get("offers", [])],
                **kwargs,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise BackendError(f"Invalid trip file {path}: {e}") from e
        self.path = path

    def _persist(self, waypoints: list[Waypoint]) -> None:
        try:
            self.path.write_text(
                yaml.safe_dump(self._document(waypoints), sort_keys=False, allow_unicode=True),
                encoding="utf-8",
            )
        except OSError as e:
            raise BackendError(f"Cannot write trip file {self.path}: {e}") from e
        logger.debug("Saved trip to %s", self.path)
