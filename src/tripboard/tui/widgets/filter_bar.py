"""Filter selector."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button

from tripboard.models.types import DEFAULT_FILTER_TYPE, FilterType
from tripboard.presenters.views import FilterOption


class FilterBar(Horizontal):
    """Filter buttons; filters that match nothing are disabled."""

    DEFAULT_CSS = """
    FilterBar {
        height: auto;
        width: 1fr;
    }

    FilterBar Button {
        min-width: 12;
        margin-right: 1;
    }
    """

    class Changed(Message):
        """User picked a filter."""

        def __init__(self, filter_type: FilterType) -> None:
            self.filter_type = filter_type
            super().__init__()

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._options: list[FilterOption] = []
        self._current = DEFAULT_FILTER_TYPE

    def compose(self) -> ComposeResult:
        for filter_type in FilterType:
            yield Button(filter_type.value.title(), name=filter_type.value)

    def on_mount(self) -> None:
        self._apply()

    def show_filters(self, options: Sequence[FilterOption], current: FilterType) -> None:
        self._options = list(options)
        self._current = current
        self._apply()

    def _apply(self) -> None:
        if not self.is_mounted:
            return
        disabled = {option.filter_type for option in self._options if option.is_disabled}
        for button in self.query(Button):
            if button.name is None:
                continue
            filter_type = FilterType(button.name)
            button.disabled = filter_type in disabled and filter_type != self._current
            button.variant = "primary" if filter_type == self._current else "default"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.name is None:
            return
        self.post_message(self.Changed(FilterType(event.button.name)))
