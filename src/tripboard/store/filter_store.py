"""Currently active filter."""

from __future__ import annotations

from tripboard.models.types import DEFAULT_FILTER_TYPE, FilterType, UpdateType
from tripboard.store.observable import Observable


class FilterStore(Observable[FilterType]):
    """Holds the active filter and notifies on every change request."""

    def __init__(self, filter_type: FilterType = DEFAULT_FILTER_TYPE) -> None:
        super().__init__()
        self._filter = filter_type

    @property
    def filter(self) -> FilterType:
        return self._filter

    def set_filter(self, update_type: UpdateType, filter_type: FilterType) -> None:
        self._filter = filter_type
        self._notify(update_type, filter_type)
