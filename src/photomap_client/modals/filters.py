"""Filter editing modal."""

from __future__ import annotations

import logging
from typing import Any

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from photomap_client.filters import has_inverted_date_range, merge_criteria
from photomap_client.models import MAX_RATING, MIN_RATING, FilterCriteria

logger = logging.getLogger(__name__)

GPS_CHOICES: list[tuple[str, str]] = [
    ("Any location", "any"),
    ("With GPS only", "yes"),
    ("Without GPS only", "no"),
]
_GPS_VALUES: dict[str, bool | None] = {"any": None, "yes": True, "no": False}

RATING_CHOICES: list[tuple[str, int]] = [("All ratings", 0)] + [
    (f"{value}+", value) for value in range(MIN_RATING, MAX_RATING + 1)
]


def _gps_choice(has_gps: bool | None) -> str:
    if has_gps is None:
        return "any"
    return "yes" if has_gps else "no"


class FilterModal(ModalScreen[dict[str, Any] | None]):
    """Edit date range, minimum rating and GPS presence.

    Dismisses with a partial edit suitable for ``FilterStateManager.apply``
    (every field present, unset ones as ``None``), or ``None`` on cancel.
    """

    BINDINGS = [
        Binding("ctrl+s", "apply", "Apply"),
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    FilterModal {
        align: center middle;
    }

    #filter-dialog {
        width: 60%;
        min-width: 50;
        height: auto;
        background: $surface;
        border: tall $accent;
        padding: 0 2;
    }

    #filter-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #filter-dialog Input,
    #filter-dialog Select {
        width: 100%;
        margin-bottom: 1;
    }

    #filter-buttons {
        height: auto;
        align: right middle;
    }

    #filter-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, current: FilterCriteria) -> None:
        super().__init__()
        self._current = current

    def compose(self) -> ComposeResult:
        current = self._current
        with Vertical(id="filter-dialog"):
            yield Label("Filter Photos", id="filter-title")
            yield Label("Taken from (YYYY-MM-DD)")
            yield Input(
                value=current.date_from.isoformat() if current.date_from else "",
                placeholder="e.g., 2024-01-01",
                id="filter-date-from",
            )
            yield Label("Taken until (YYYY-MM-DD)")
            yield Input(
                value=current.date_to.isoformat() if current.date_to else "",
                placeholder="e.g., 2024-12-31",
                id="filter-date-to",
            )
            yield Label("Minimum rating")
            yield Select(
                RATING_CHOICES,
                value=current.min_rating or 0,
                allow_blank=False,
                id="filter-min-rating",
            )
            yield Label("Location")
            yield Select(
                GPS_CHOICES,
                value=_gps_choice(current.has_gps),
                allow_blank=False,
                id="filter-gps",
            )
            with Horizontal(id="filter-buttons"):
                yield Button("Cancel (Esc)", variant="default", id="filter-cancel")
                yield Button("Apply (Ctrl+S)", variant="primary", id="filter-apply")

    def on_mount(self) -> None:
        self.query_one("#filter-date-from", Input).focus()

    def _build_partial(self) -> dict[str, Any]:
        rating_value = self.query_one("#filter-min-rating", Select).value
        gps_value = self.query_one("#filter-gps", Select).value
        return {
            "date_from": self.query_one("#filter-date-from", Input).value.strip() or None,
            "date_to": self.query_one("#filter-date-to", Input).value.strip() or None,
            "min_rating": rating_value if isinstance(rating_value, int) else 0,
            "has_gps": _GPS_VALUES.get(gps_value if isinstance(gps_value, str) else "any"),
        }

    def action_apply(self) -> None:
        partial = self._build_partial()
        try:
            merged = merge_criteria(self._current, partial)
        except ValueError as exc:
            self.notify(str(exc), title="Filters", severity="warning")
            return
        if has_inverted_date_range(merged):
            self.notify(
                f"'From' date {merged.date_from} is after 'to' date {merged.date_to}",
                title="Filters",
                severity="warning",
            )
            return
        self.dismiss(partial)

    def action_cancel(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#filter-apply")
    def on_apply_pressed(self) -> None:
        self.action_apply()

    @on(Button.Pressed, "#filter-cancel")
    def on_cancel_pressed(self) -> None:
        self.action_cancel()

    @on(Input.Submitted)
    def on_input_submitted(self) -> None:
        self.action_apply()
