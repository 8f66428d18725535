"""Trip summary header."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from tripboard.presenters.trip_info import TripInfo


class TripInfoHeader(Static):
    """Shows route, dates and total cost."""

    DEFAULT_CSS = """
    TripInfoHeader {
        height: auto;
        padding: 1 2;
        border-bottom: solid $surface-lighten-1;
    }
    """

    def show_trip_info(self, info: TripInfo | None) -> None:
        if info is None:
            self.update(Text("No trip yet", style="dim"))
            return
        text = Text()
        text.append(info.title, style="bold")
        text.append(f"\n{info.dates}", style="dim")
        text.append(f"\nTotal: €{info.total_cost}")
        self.update(text)
