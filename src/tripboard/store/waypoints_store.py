"""Canonical waypoint collection plus reference catalogs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.types import UpdateType
from tripboard.models.waypoint import Waypoint
from tripboard.store.backend import BackendError, TripBackend
from tripboard.store.observable import Observable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadPolicy:
    """Retry behaviour for the initial fetch."""

    max_attempts: int = 3
    initial_delay_seconds: float = 0.5
    multiplier: float = 2.0


class WaypointsStore(Observable[Waypoint | None]):
    """Holds the trip and notifies observers after every settled mutation.

    Mutations take the update type chosen by the caller and pass it
    through to the notification unchanged. A failed mutation raises and
    leaves the collection untouched; observers are not notified.
    """

    def __init__(self, backend: TripBackend, load_policy: LoadPolicy | None = None) -> None:
        super().__init__()
        self._backend = backend
        self._load_policy = load_policy or LoadPolicy()
        self._waypoints: list[Waypoint] = []
        self._destinations: list[Destination] = []
        self._offers: list[OfferGroup] = []
        self._load_error: str | None = None
        self._is_loaded = False

    @property
    def waypoints(self) -> list[Waypoint]:
        return list(self._waypoints)

    @property
    def destinations(self) -> list[Destination]:
        return list(self._destinations)

    @property
    def offers(self) -> list[OfferGroup]:
        return list(self._offers)

    @property
    def load_error(self) -> str | None:
        """Why the initial load failed, or None."""
        return self._load_error

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    async def init(self) -> None:
        """Fetch the trip, retrying with backoff, then emit INIT.

        INIT is emitted even when every attempt fails; ``load_error`` then
        carries the last failure and the collections stay empty.
        """
        policy = self._load_policy
        delay = policy.initial_delay_seconds
        for attempt in range(1, policy.max_attempts + 1):
            try:
                waypoints, destinations, offers = await asyncio.gather(
                    self._backend.get_waypoints(),
                    self._backend.get_destinations(),
                    self._backend.get_offers(),
                )
            except BackendError as e:
                logger.warning(
                    "Loading trip failed (attempt %d/%d): %s",
                    attempt,
                    policy.max_attempts,
                    e,
                )
                self._load_error = str(e)
                if attempt < policy.max_attempts:
                    await asyncio.sleep(delay)
                    delay *= policy.multiplier
                continue
            self._waypoints = list(waypoints)
            self._destinations = list(destinations)
            self._offers = list(offers)
            self._load_error = None
            logger.info(
                "Loaded %d waypoints, %d destinations, %d offer groups",
                len(self._waypoints),
                len(self._destinations),
                len(self._offers),
            )
            break
        else:
            self._waypoints = []
            self._destinations = []
            self._offers = []
            logger.error("Giving up loading trip: %s", self._load_error)

        self._is_loaded = True
        self._notify(UpdateType.INIT, None)

    def _index_of(self, waypoint_id: str) -> int:
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.id == waypoint_id:
                return index
        return -1

    async def update_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        """Persist ``update`` and replace the stored waypoint.

        Raises:
            ValueError: If no waypoint with this id exists.
            BackendError: If the backend rejects the update.
        """
        if self._index_of(update.id) == -1:
            raise ValueError(f"Can't update unexisting waypoint {update.id}")

        updated = await self._backend.update_waypoint(update)

        # Re-resolve: another mutation may have settled while we waited.
        index = self._index_of(updated.id)
        if index == -1:
            raise ValueError(f"Waypoint {updated.id} disappeared during update")
        self._waypoints[index] = updated
        self._notify(update_type, updated)

    async def add_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        """Persist a new waypoint and put it first in the collection.

        Raises:
            BackendError: If the backend rejects the waypoint.
        """
        created = await self._backend.add_waypoint(update)
        self._waypoints.insert(0, created)
        self._notify(update_type, created)

    async def delete_waypoint(self, update_type: UpdateType, update: Waypoint) -> None:
        """Delete a waypoint.

        Raises:
            ValueError: If no waypoint with this id exists.
            BackendError: If the backend rejects the deletion.
        """
        if self._index_of(update.id) == -1:
            raise ValueError(f"Can't delete unexisting waypoint {update.id}")

        await self._backend.delete_waypoint(update.id)

        index = self._index_of(update.id)
        if index != -1:
            del self._waypoints[index]
        self._notify(update_type, update)
