"""Board widget hosting the sort bar and the waypoint rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Static

from tripboard.models.types import SortType
from tripboard.tui.widgets.new_waypoint_form import NewWaypointForm
from tripboard.tui.widgets.sort_bar import SortBar
from tripboard.tui.widgets.waypoint_item import WaypointItem

if TYPE_CHECKING:
    from tripboard.presenters.new_waypoint_presenter import NewWaypointPresenter
    from tripboard.presenters.waypoint_presenter import WaypointPresenter


class EventsBoard(Vertical):
    """Loading/error/empty messages, sort bar and the list of rows."""

    DEFAULT_CSS = """
    EventsBoard {
        height: 1fr;
    }

    EventsBoard.-blocked {
        opacity: 60%;
    }

    EventsBoard #board-message {
        padding: 1 2;
        color: $text-muted;
    }

    EventsBoard #board-message.-error {
        color: $error;
    }

    EventsBoard #events-list {
        height: 1fr;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("Loading...", id="board-message")
        yield SortBar(id="sort-bar")
        yield VerticalScroll(id="events-list")

    def on_mount(self) -> None:
        self.query_one("#sort-bar", SortBar).display = False

    def _message(self, text: str, *, error: bool = False) -> None:
        message = self.query_one("#board-message", Static)
        message.update(text)
        message.set_class(error, "-error")
        message.display = True

    # --- BoardView ---

    def show_loading(self) -> None:
        self._message("Loading...")
        self.query_one("#sort-bar", SortBar).display = False

    def show_error(self, message: str) -> None:
        self._message(message, error=True)
        self.query_one("#sort-bar", SortBar).display = False

    def show_board(self, *, sort_type: SortType, empty_message: str | None) -> None:
        sort_bar = self.query_one("#sort-bar", SortBar)
        sort_bar.set_current(sort_type)
        sort_bar.display = True
        if empty_message is None:
            self.query_one("#board-message", Static).display = False
        else:
            self._message(empty_message)

    def clear_board(self) -> None:
        self.query_one("#board-message", Static).display = False
        self.query_one("#sort-bar", SortBar).display = False

    def set_blocked(self, blocked: bool) -> None:
        self.disabled = blocked
        self.set_class(blocked, "-blocked")

    def mount_waypoint(self, presenter: "WaypointPresenter") -> WaypointItem:
        item = WaypointItem(presenter)
        self.query_one("#events-list", VerticalScroll).mount(item)
        return item

    def mount_new_waypoint(self, presenter: "NewWaypointPresenter") -> NewWaypointForm:
        form = NewWaypointForm(presenter)
        events_list = self.query_one("#events-list", VerticalScroll)
        if events_list.children:
            events_list.mount(form, before=0)
        else:
            events_list.mount(form)
        return form
