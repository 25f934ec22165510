"""Photo action dialogs: delete/clear-rating confirmation and rating entry."""

from __future__ import annotations

import logging

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Select, Static

from photomap_client.models import MAX_RATING, MIN_RATING

logger = logging.getLogger(__name__)

# ============================================================================
# Confirm Modal
# ============================================================================


class ConfirmModal(ModalScreen[bool]):
    """Ask before deleting a photo or dropping the user's rating on it.

    ``action`` names what ``y`` does ("Delete", "Remove rating") and labels
    the confirm button; declining leaves the photo as it is.
    """

    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "Keep"),
        Binding("escape", "cancel", "Keep"),
    ]

    CSS = """
    ConfirmModal {
        align: center middle;
    }

    #photo-confirm-dialog {
        width: 50%;
        min-width: 40;
        height: auto;
        background: $surface;
        border: tall $warning;
        padding: 0 2;
    }

    #photo-confirm-prompt {
        text-style: bold;
        margin-bottom: 1;
    }

    #photo-confirm-buttons {
        height: auto;
        align: right middle;
    }

    #photo-confirm-buttons Button {
        margin-left: 1;
    }

    #photo-confirm-hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def __init__(self, prompt: str, *, action: str = "Delete") -> None:
        super().__init__()
        self._prompt = prompt
        self._action = action

    @property
    def confirm_label(self) -> str:
        return self._action

    def compose(self) -> ComposeResult:
        with Vertical(id="photo-confirm-dialog"):
            yield Static(self._prompt, id="photo-confirm-prompt")
            with Horizontal(id="photo-confirm-buttons"):
                yield Button(f"{self._action} (y)", variant="error", id="photo-confirm-yes")
                yield Button("Keep photo (n)", variant="default", id="photo-confirm-no")
            yield Static(
                f"y: {self._action.lower()}  ·  n / Esc: leave the photo unchanged",
                id="photo-confirm-hint",
            )

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#photo-confirm-yes")
    def on_yes_pressed(self) -> None:
        self.action_confirm()

    @on(Button.Pressed, "#photo-confirm-no")
    def on_no_pressed(self) -> None:
        self.action_cancel()


# ============================================================================
# Rating Modal
# ============================================================================


class RatingModal(ModalScreen[int | None]):
    """Pick a 1-10 rating for one photo. Dismisses with None on cancel."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel", "Cancel"),
    ]

    CSS = """
    RatingModal {
        align: center middle;
    }

    #rating-dialog {
        width: 50%;
        min-width: 40;
        height: auto;
        background: $surface;
        border: tall $accent;
        padding: 0 2;
    }

    #rating-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #rating-select {
        width: 100%;
        margin-bottom: 1;
    }

    #rating-buttons {
        height: auto;
        align: right middle;
    }

    #rating-buttons Button {
        margin-left: 1;
    }
    """

    def __init__(self, photo_name: str, current: int | None = None) -> None:
        super().__init__()
        self._photo_name = photo_name
        if current is None or not MIN_RATING <= current <= MAX_RATING:
            current = MAX_RATING // 2
        self._initial = current

    def compose(self) -> ComposeResult:
        with Vertical(id="rating-dialog"):
            yield Label(f"Rate {self._photo_name}", id="rating-title")
            yield Select(
                [(str(value), value) for value in range(MIN_RATING, MAX_RATING + 1)],
                value=self._initial,
                allow_blank=False,
                id="rating-select",
            )
            with Horizontal(id="rating-buttons"):
                yield Button("Cancel (Esc)", variant="default", id="rating-cancel")
                yield Button("Save (Ctrl+S)", variant="primary", id="rating-save")

    def on_mount(self) -> None:
        self.query_one("#rating-select", Select).focus()

    def action_save(self) -> None:
        value = self.query_one("#rating-select", Select).value
        if not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            self.notify("Pick a rating between 1 and 10", title="Rate", severity="warning")
            return
        self.dismiss(value)

    def action_cancel(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#rating-save")
    def on_save_pressed(self) -> None:
        self.action_save()

    @on(Button.Pressed, "#rating-cancel")
    def on_cancel_pressed(self) -> None:
        self.action_cancel()
