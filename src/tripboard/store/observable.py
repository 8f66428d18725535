"""Minimal observer registry used by the stores."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeAlias, TypeVar

from tripboard.models.types import UpdateType

T = TypeVar("T")

Observer: TypeAlias = Callable[[UpdateType, T], None]


class Observable(Generic[T]):
    """Delivers ``(update_type, payload)`` to observers in registration order."""

    def __init__(self) -> None:
        self._observers: list[Observer[T]] = []

    def add_observer(self, observer: Observer[T]) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: Observer[T]) -> None:
        self._observers = [existing for existing in self._observers if existing != observer]

    def _notify(self, update_type: UpdateType, payload: T) -> None:
        for observer in list(self._observers):
            observer(update_type, payload)
