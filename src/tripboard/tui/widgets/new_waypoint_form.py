"""Create form widget."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Button, Static

from tripboard.forms import FormError, form_from_waypoint, parse_waypoint_form
from tripboard.models.catalog import Destination, OfferGroup
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import Waypoint
from tripboard.tui.widgets.waypoint_editor import WaypointEditor

if TYPE_CHECKING:
    from tripboard.presenters.new_waypoint_presenter import NewWaypointPresenter

logger = logging.getLogger(__name__)

ABORT_FLASH_SECONDS = 1.5


class NewWaypointForm(Vertical):
    """Form for a waypoint that does not exist yet."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    DEFAULT_CSS = """
    NewWaypointForm {
        height: auto;
        margin-bottom: 1;
        border: round $accent;
    }

    NewWaypointForm.-aborting {
        border: heavy $error;
    }

    NewWaypointForm .form-title {
        text-style: bold;
        padding: 0 1;
    }
    """

    def __init__(self, presenter: "NewWaypointPresenter", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._presenter = presenter
        self._draft: Waypoint | None = None
        self._destinations: Sequence[Destination] = ()
        self._offers: Sequence[OfferGroup] = ()
        self._state = VisualState.IDLE

    def compose(self) -> ComposeResult:
        yield Static("New event", classes="form-title")
        if self._draft is not None:
            yield self._build_editor(self._draft)

    def _build_editor(self, draft: Waypoint) -> WaypointEditor:
        return WaypointEditor(
            form_from_waypoint(draft), self._destinations, self._offers, allow_delete=False
        )

    # --- NewWaypointView ---

    def show_draft(
        self,
        draft: Waypoint,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
    ) -> None:
        self._draft = draft
        self._destinations = destinations
        self._offers = offers
        if self.is_mounted:
            self.query(WaypointEditor).remove()
            self.mount(self._build_editor(draft))

    def show_state(self, state: VisualState) -> None:
        self._state = state
        if not self.is_mounted:
            return
        self.set_class(state == VisualState.ABORTING, "-aborting")
        for editor in self.query(WaypointEditor):
            editor.show_state(state)
        if state == VisualState.ABORTING:
            self.set_timer(ABORT_FLASH_SECONDS, self._presenter.dismiss_abort)

    # --- User input ---

    def action_cancel(self) -> None:
        self._presenter.cancel()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.has_class("cancel"):
            self._presenter.cancel()
        elif event.button.has_class("save"):
            self._save()

    def _save(self) -> None:
        if self._draft is None:
            return
        editor = self.query_one(WaypointEditor)
        try:
            draft = parse_waypoint_form(
                editor.read_form(),
                base=self._draft,
                destinations=self._destinations,
                offers=self._offers,
            )
        except FormError as e:
            logger.debug("Rejected new waypoint: %s", e)
            editor.show_error(str(e))
            return
        # Run on the app: the form is removed once the waypoint is added.
        self.app.run_worker(
            self._presenter.submit(draft), group="board-actions", exit_on_error=False
        )
