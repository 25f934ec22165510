"""Internal UI constants for the PhotomapBrowser app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

# Approximate width of one terminal cell in pixels; pointer thresholds are
# configured in pixels but textual reports mouse positions in cells.
CELL_WIDTH_PX = 8

GALLERY_ROUTE = "/gallery"

APP_CSS = """
#main-container {
    height: 1fr;
}

#list-pane {
    width: 2fr;
    min-width: 40;
    height: 100%;
    border: tall $panel;
}

#list-pane:focus-within {
    border: tall $accent;
}

#detail-pane {
    width: 3fr;
    height: 100%;
    border: tall $panel;
    padding: 0 1;
}

#list-header {
    padding: 0 1;
    color: $accent;
    text-style: bold;
}

#photo-list {
    height: 1fr;
    border: none;
}

#status-bar {
    padding: 0 1;
    color: $text-muted;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit"),
    Binding("f", "edit_filters", "Filters"),
    Binding("x", "clear_filters", "Clear Filters"),
    Binding("f5", "reload", "Reload"),
    Binding("r", "rate_photo", "Rate"),
    Binding("u", "clear_rating", "Clear Rating", show=False),
    Binding("d", "delete_photo", "Delete", show=False),
    Binding("n", "next_page", "Next Page", show=False),
    Binding("p", "previous_page", "Prev Page", show=False),
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "CELL_WIDTH_PX",
    "GALLERY_ROUTE",
]
