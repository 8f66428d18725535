"""Main Tripboard TUI application."""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header

from tripboard.config import settings
from tripboard.presenters.filter_presenter import FilterPresenter
from tripboard.presenters.gate import UiGate
from tripboard.presenters.list_presenter import ListPresenter
from tripboard.presenters.trip_info import TripInfoPresenter
from tripboard.store.backend import TripBackend
from tripboard.store.filter_store import FilterStore
from tripboard.store.waypoints_store import LoadPolicy, WaypointsStore
from tripboard.tui.widgets.board import EventsBoard
from tripboard.tui.widgets.filter_bar import FilterBar
from tripboard.tui.widgets.sort_bar import SortBar
from tripboard.tui.widgets.trip_header import TripInfoHeader

logger = logging.getLogger(__name__)


class TripboardApp(App[None]):
    """Trip board: filter, sort, create, edit and delete waypoints."""

    TITLE = "Tripboard"
    SUB_TITLE = "Plan your trip"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("n", "new_event", "New event"),
    ]

    CSS = """
    Screen {
        background: $surface;
    }

    #controls {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, backend: TripBackend) -> None:
        super().__init__()
        self.waypoints_store = WaypointsStore(
            backend,
            LoadPolicy(
                max_attempts=settings.load_max_attempts,
                initial_delay_seconds=settings.load_retry_delay_seconds,
            ),
        )
        self.filter_store = FilterStore()
        self.list_presenter: ListPresenter | None = None
        self.filter_presenter: FilterPresenter | None = None
        self.trip_info_presenter: TripInfoPresenter | None = None
        self.gate: UiGate | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield TripInfoHeader(id="trip-info")
        with Horizontal(id="controls"):
            yield FilterBar(id="filters")
            yield Button("New event", variant="primary", id="new-event")
        yield EventsBoard(id="board")
        yield Footer()

    def on_mount(self) -> None:
        saved_theme = settings.theme
        logger.info("Loading saved theme: %s", saved_theme)
        self.theme = saved_theme

    def on_ready(self) -> None:
        """Wire presenters to the mounted widgets and start loading."""
        board = self.query_one("#board", EventsBoard)
        gate = UiGate(
            lower_limit=settings.block_lower_limit_ms / 1000,
            upper_limit=settings.block_upper_limit_ms / 1000,
            on_change=self._handle_block_change,
        )
        self.gate = gate
        self.list_presenter = ListPresenter(
            view=board,
            waypoints_store=self.waypoints_store,
            filter_store=self.filter_store,
            gate=gate,
            on_new_waypoint_destroy=self._handle_new_waypoint_destroy,
            load_timeout=settings.load_timeout_seconds or None,
        )
        self.filter_presenter = FilterPresenter(
            view=self.query_one("#filters", FilterBar),
            filter_store=self.filter_store,
            waypoints_store=self.waypoints_store,
        )
        self.trip_info_presenter = TripInfoPresenter(
            view=self.query_one("#trip-info", TripInfoHeader),
            waypoints_store=self.waypoints_store,
        )

        self.list_presenter.initialize()
        self.filter_presenter.init()
        self.trip_info_presenter.init()
        self.run_worker(self.waypoints_store.init(), name="load_trip", exit_on_error=False)

    def _gate_held(self) -> bool:
        return self.gate is not None and self.gate.is_blocked

    def _handle_block_change(self, blocked: bool) -> None:
        """Make the controls and the board non-interactive while a change is saved."""
        self.query_one("#controls", Horizontal).disabled = blocked
        self.query_one("#board", EventsBoard).set_blocked(blocked)

    def _handle_new_waypoint_destroy(self) -> None:
        self.query_one("#new-event", Button).disabled = False

    def action_new_event(self) -> None:
        if self.list_presenter is None or self._gate_held():
            return
        button = self.query_one("#new-event", Button)
        if button.disabled:
            return
        button.disabled = True
        self.list_presenter.create_waypoint()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-event":
            self.action_new_event()

    def on_sort_bar_changed(self, message: SortBar.Changed) -> None:
        if self.list_presenter is not None and not self._gate_held():
            self.list_presenter.handle_sort_type_change(message.sort_type)

    def on_filter_bar_changed(self, message: FilterBar.Changed) -> None:
        if self.filter_presenter is not None and not self._gate_held():
            self.filter_presenter.handle_filter_type_change(message.filter_type)

    def watch_theme(self, new_theme: str) -> None:
        """Save theme whenever it changes."""
        settings.theme = new_theme
