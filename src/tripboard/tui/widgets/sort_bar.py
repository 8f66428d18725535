"""Sort selector shown above the waypoint list."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button

from tripboard.models.types import DEFAULT_SORT_TYPE, DISABLED_SORT_TYPES, SortType

SORT_LABELS: dict[SortType, str] = {
    SortType.DAY: "Day",
    SortType.EVENT: "Event",
    SortType.TIME: "Time",
    SortType.PRICE: "Price",
    SortType.OFFERS: "Offers",
}


class SortBar(Horizontal):
    """One button per sort type; the active one is highlighted."""

    DEFAULT_CSS = """
    SortBar {
        height: auto;
        padding: 0 1;
    }

    SortBar Button {
        min-width: 10;
        margin-right: 1;
    }
    """

    class Changed(Message):
        """User picked a sort type."""

        def __init__(self, sort_type: SortType) -> None:
            self.sort_type = sort_type
            super().__init__()

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._current = DEFAULT_SORT_TYPE

    def compose(self) -> ComposeResult:
        for sort_type in SortType:
            yield Button(
                SORT_LABELS[sort_type],
                name=sort_type.value,
                disabled=sort_type in DISABLED_SORT_TYPES,
                variant="primary" if sort_type == self._current else "default",
            )

    def set_current(self, sort_type: SortType) -> None:
        self._current = sort_type
        if not self.is_mounted:
            return
        for button in self.query(Button):
            button.variant = "primary" if button.name == sort_type.value else "default"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.name is None:
            return
        self.post_message(self.Changed(SortType(event.button.name)))
