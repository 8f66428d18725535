"""Stores holding the trip and the active filter."""

from .backend import (
    BackendError,
    InMemoryTripBackend,
    TripBackend,
    YamlTripBackend,
    load_trip_document,
)
from .filter_store import FilterStore
from .observable import Observable, Observer
from .waypoints_store import LoadPolicy, WaypointsStore

__all__ = [
    "BackendError",
    "FilterStore",
    "InMemoryTripBackend",
    "LoadPolicy",
    "Observable",
    "Observer",
    "TripBackend",
    "WaypointsStore",
    "YamlTripBackend",
    "load_trip_document",
]
