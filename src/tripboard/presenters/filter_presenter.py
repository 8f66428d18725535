"""Presenter for the filter bar."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tripboard.models.types import FilterType, UpdateType
from tripboard.presenters.pipeline import count_by_filter
from tripboard.presenters.views import FilterOption, FilterView

if TYPE_CHECKING:
    from tripboard.store.filter_store import FilterStore
    from tripboard.store.waypoints_store import WaypointsStore


class FilterPresenter:
    """Keeps the filter bar in sync with both stores.

    Filters that would show nothing are rendered disabled.
    """

    def __init__(
        self,
        *,
        view: FilterView,
        filter_store: "FilterStore",
        waypoints_store: "WaypointsStore",
    ) -> None:
        self._view = view
        self._filter_store = filter_store
        self._waypoints_store = waypoints_store
        self._filter_store.add_observer(self._handle_model_event)
        self._waypoints_store.add_observer(self._handle_model_event)

    @property
    def options(self) -> list[FilterOption]:
        counts = count_by_filter(self._waypoints_store.waypoints)
        return [FilterOption(filter_type, counts[filter_type]) for filter_type in FilterType]

    def init(self) -> None:
        self._view.show_filters(self.options, self._filter_store.filter)

    def handle_filter_type_change(self, filter_type: FilterType) -> None:
        if filter_type == self._filter_store.filter:
            return
        self._filter_store.set_filter(UpdateType.MAJOR, filter_type)

    def _handle_model_event(self, update_type: UpdateType, payload: Any) -> None:
        del update_type, payload
        self.init()
