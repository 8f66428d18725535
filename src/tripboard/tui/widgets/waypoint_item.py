"""Waypoint row widget."""

from __future__ import annotations

import logging
from collections.abc import Coroutine, Sequence
from typing import TYPE_CHECKING, Any

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Static

from tripboard.formatting import format_day, format_duration, format_time
from tripboard.forms import FormError, form_from_waypoint, parse_waypoint_form
from tripboard.models.catalog import Destination, OfferGroup, find_destination, selected_offers
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import Waypoint
from tripboard.tui.widgets.waypoint_editor import WaypointEditor

if TYPE_CHECKING:
    from tripboard.presenters.waypoint_presenter import WaypointPresenter

logger = logging.getLogger(__name__)

ABORT_FLASH_SECONDS = 1.5


def format_waypoint_summary(
    waypoint: Waypoint,
    destinations: Sequence[Destination],
    offers: Sequence[OfferGroup],
) -> Text:
    """Single-row description of a waypoint."""
    destination = find_destination(destinations, waypoint.destination)
    text = Text()
    text.append(f"{format_day(waypoint.date_from)}  ", style="dim")
    text.append(f"{waypoint.type.value.title()} {destination.name if destination else ''}", style="bold")
    text.append(
        f"  {format_time(waypoint.date_from)} — {format_time(waypoint.date_to)}"
        f" ({format_duration(waypoint.duration)})"
    )
    text.append(f"  €{waypoint.base_price}", style="bold")
    extras = selected_offers(offers, waypoint.type.value, waypoint.offers)
    if extras:
        text.append("\n    " + ", ".join(f"{o.title} +€{o.price}" for o in extras), style="dim")
    return text


class WaypointItem(Vertical):
    """One waypoint with an inline editor."""

    can_focus = True

    BINDINGS = [
        Binding("enter", "open_editor", "Edit"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("escape", "close_editor", "Close"),
    ]

    DEFAULT_CSS = """
    WaypointItem {
        height: auto;
        margin-bottom: 1;
        border: round $surface-lighten-1;
    }

    WaypointItem:focus {
        border: round $accent;
    }

    WaypointItem.-saving, WaypointItem.-deleting {
        opacity: 70%;
    }

    WaypointItem.-aborting {
        border: heavy $error;
    }

    WaypointItem .item-row {
        height: auto;
    }

    WaypointItem .summary {
        width: 1fr;
        padding: 0 1;
    }

    WaypointItem .favorite.-active {
        color: $warning;
    }
    """

    def __init__(self, presenter: "WaypointPresenter", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._presenter = presenter
        self._waypoint: Waypoint | None = None
        self._destinations: Sequence[Destination] = ()
        self._offers: Sequence[OfferGroup] = ()
        self._state = VisualState.IDLE
        self._editor: WaypointEditor | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(classes="item-row"):
            yield Static("", classes="summary")
            yield Button("☆", classes="favorite")
            yield Button("▾", classes="rollup")

    def on_mount(self) -> None:
        self._render_summary()
        self._apply_state()

    # --- WaypointView ---

    def show_waypoint(
        self,
        waypoint: Waypoint,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
    ) -> None:
        self._waypoint = waypoint
        self._destinations = destinations
        self._offers = offers
        self._render_summary()

    def open_editor(self) -> None:
        if self._waypoint is None or self._editor is not None:
            return
        self._editor = WaypointEditor(
            form_from_waypoint(self._waypoint),
            self._destinations,
            self._offers,
            allow_delete=True,
        )
        self.mount(self._editor)

    def close_editor(self) -> None:
        if self._editor is None:
            return
        self._editor.remove()
        self._editor = None
        self.focus()

    def show_state(self, state: VisualState) -> None:
        self._state = state
        self._apply_state()
        if state == VisualState.ABORTING:
            self.set_timer(ABORT_FLASH_SECONDS, self._presenter.dismiss_abort)

    # --- Rendering ---

    def _render_summary(self) -> None:
        if not self.is_mounted or self._waypoint is None:
            return
        self.query_one(".summary", Static).update(
            format_waypoint_summary(self._waypoint, self._destinations, self._offers)
        )
        favorite = self.query_one(".favorite", Button)
        favorite.label = "★" if self._waypoint.is_favorite else "☆"
        favorite.set_class(self._waypoint.is_favorite, "-active")

    def _apply_state(self) -> None:
        if not self.is_mounted:
            return
        self.set_class(self._state == VisualState.SAVING, "-saving")
        self.set_class(self._state == VisualState.DELETING, "-deleting")
        self.set_class(self._state == VisualState.ABORTING, "-aborting")
        if self._editor is not None and self._editor.is_mounted:
            self._editor.show_state(self._state)

    # --- User input ---

    def _run(self, work: Coroutine[Any, Any, None]) -> None:
        # Run on the app: this row may be removed while the action is pending.
        self.app.run_worker(work, group="board-actions", exit_on_error=False)

    def action_open_editor(self) -> None:
        self._presenter.open_editor()

    def action_close_editor(self) -> None:
        self._presenter.reset_view()

    def action_toggle_favorite(self) -> None:
        self._run(self._presenter.toggle_favorite())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        button = event.button
        if button.has_class("favorite"):
            self.action_toggle_favorite()
        elif button.has_class("rollup"):
            self._presenter.open_editor()
        elif button.has_class("close"):
            self._presenter.reset_view()
        elif button.has_class("delete"):
            self._run(self._presenter.delete())
        elif button.has_class("save"):
            self._save()

    def _save(self) -> None:
        if self._editor is None or self._waypoint is None:
            return
        try:
            update = parse_waypoint_form(
                self._editor.read_form(),
                base=self._waypoint,
                destinations=self._destinations,
                offers=self._offers,
            )
        except FormError as e:
            logger.debug("Rejected edit of %s: %s", self._waypoint.id, e)
            self._editor.show_error(str(e))
            return
        self._run(self._presenter.submit(update))
