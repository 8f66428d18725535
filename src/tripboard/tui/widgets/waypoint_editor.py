"""Editor fields shared by waypoint rows and the create form."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Input, Select, Static

from tripboard.forms import WaypointForm
from tripboard.models.catalog import Destination, Offer, OfferGroup, offers_for_type
from tripboard.models.visual_state import VisualState
from tripboard.models.waypoint import WaypointType


def _offer_checkboxes(offers: Sequence[Offer], checked: Sequence[str]) -> list[Checkbox]:
    return [
        Checkbox(f"{offer.title} +€{offer.price}", value=offer.id in checked, name=offer.id)
        for offer in offers
    ]


class WaypointEditor(Vertical):
    """Form fields plus Save and Delete/Cancel buttons.

    Buttons are identified by class (``save``, ``delete``, ``cancel``,
    ``close``); the owning widget handles their presses.
    """

    DEFAULT_CSS = """
    WaypointEditor {
        height: auto;
        padding: 0 1 1 1;
        border-top: dashed $surface-lighten-2;
    }

    WaypointEditor .editor-row {
        height: auto;
    }

    WaypointEditor Select {
        width: 1fr;
    }

    WaypointEditor Input {
        width: 1fr;
    }

    WaypointEditor .offers {
        height: auto;
    }

    WaypointEditor .form-error {
        color: $error;
        height: auto;
    }

    WaypointEditor .editor-buttons {
        height: auto;
    }
    """

    def __init__(
        self,
        form: WaypointForm,
        destinations: Sequence[Destination],
        offers: Sequence[OfferGroup],
        *,
        allow_delete: bool,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._form = form
        self._destinations = destinations
        self._offers = offers
        self._allow_delete = allow_delete
        self._current_type = form.type

    def compose(self) -> ComposeResult:
        form = self._form
        destination_kwargs: dict[str, Any] = {}
        if form.destination is not None:
            destination_kwargs["value"] = form.destination
        with Horizontal(classes="editor-row"):
            yield Select(
                [(waypoint_type.value.title(), waypoint_type.value) for waypoint_type in WaypointType],
                value=form.type,
                allow_blank=False,
                classes="type-select",
            )
            yield Select(
                [(destination.name, destination.id) for destination in self._destinations],
                prompt="Destination",
                classes="destination-select",
                **destination_kwargs,
            )
        with Horizontal(classes="editor-row"):
            yield Input(form.date_from, placeholder="YYYY-MM-DD HH:MM", classes="date-from")
            yield Input(form.date_to, placeholder="YYYY-MM-DD HH:MM", classes="date-to")
            yield Input(form.base_price, placeholder="Price", classes="price")
        yield Vertical(
            *_offer_checkboxes(offers_for_type(self._offers, form.type), form.offers),
            classes="offers",
        )
        yield Static("", classes="form-error")
        with Horizontal(classes="editor-buttons"):
            yield Button("Save", variant="primary", classes="save")
            if self._allow_delete:
                yield Button("Delete", variant="error", classes="delete")
                yield Button("Close", classes="close")
            else:
                yield Button("Cancel", variant="error", classes="cancel")

    def on_select_changed(self, event: Select.Changed) -> None:
        if not event.select.has_class("type-select") or not isinstance(event.value, str):
            return
        if event.value == self._current_type:
            return
        self._current_type = event.value
        container = self.query_one(".offers", Vertical)
        container.remove_children()
        container.mount(*_offer_checkboxes(offers_for_type(self._offers, event.value), ()))

    def read_form(self) -> WaypointForm:
        """Collect the current field values."""
        type_value = self.query_one(".type-select", Select).value
        destination_value = self.query_one(".destination-select", Select).value
        return WaypointForm(
            type=type_value if isinstance(type_value, str) else self._current_type,
            destination=destination_value if isinstance(destination_value, str) else None,
            date_from=self.query_one(".date-from", Input).value,
            date_to=self.query_one(".date-to", Input).value,
            base_price=self.query_one(".price", Input).value,
            offers=tuple(
                checkbox.name
                for checkbox in self.query(Checkbox)
                if checkbox.value and checkbox.name is not None
            ),
            is_favorite=self._form.is_favorite,
        )

    def show_error(self, message: str) -> None:
        self.query_one(".form-error", Static).update(message)

    def show_state(self, state: VisualState) -> None:
        """Disable input while a save or delete is pending."""
        busy = state in (VisualState.SAVING, VisualState.DELETING)
        for widget in self.query("Input, Select, Checkbox, Button"):
            widget.disabled = busy
        self.query_one(".save", Button).label = (
            "Saving..." if state == VisualState.SAVING else "Save"
        )
        if self._allow_delete:
            self.query_one(".delete", Button).label = (
                "Deleting..." if state == VisualState.DELETING else "Delete"
            )
        if state == VisualState.ABORTING:
            self.show_error("Could not save the change. Please try again.")
        elif state != VisualState.IDLE:
            self.show_error("")
