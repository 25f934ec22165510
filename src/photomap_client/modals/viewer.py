"""Fullscreen photo viewer driven by a ViewerNavigator."""

from __future__ import annotations

import logging

from rich.markup import escape as escape_markup
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Static

from photomap_client.gestures import (
    GestureAction,
    GestureTracker,
    dispatch,
    interpret_key,
)
from photomap_client.models import DEFAULT_SWIPE_THRESHOLD_PX, DEFAULT_TAP_THRESHOLD_PX
from photomap_client.notifier import Unsubscribe
from photomap_client.viewer import ViewerNavigator, ViewerState
from photomap_client.widgets.listing import render_photo_details, render_position

logger = logging.getLogger(__name__)


class PhotoViewerScreen(Screen[None]):
    """Shows one photo at a time from the navigator's snapshot.

    Left/right arrows and horizontal drags step through photos; Escape or a
    click closes. The screen never pops itself: closing goes through the
    navigator, whose hooks decide what happens to the screen stack.
    """

    CSS = """
    PhotoViewerScreen {
        align: center middle;
    }

    #viewer-body {
        width: 90%;
        height: auto;
        border: tall $accent;
        padding: 1 2;
    }

    #viewer-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #viewer-position {
        text-align: center;
        margin-top: 1;
    }

    #viewer-hint {
        color: $text-muted;
        text-align: center;
    }
    """

    def __init__(
        self,
        navigator: ViewerNavigator,
        *,
        tap_threshold: float = DEFAULT_TAP_THRESHOLD_PX,
        swipe_threshold: float = DEFAULT_SWIPE_THRESHOLD_PX,
    ) -> None:
        super().__init__()
        self._navigator = navigator
        self._tracker = GestureTracker(tap_threshold=tap_threshold, swipe_threshold=swipe_threshold)
        self._unsubscribe: Unsubscribe | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="viewer-body"):
            yield Static("", id="viewer-title")
            yield Static("", id="viewer-details")
            yield Static("", id="viewer-position")
            yield Static("← / → browse · drag to swipe · Esc or click to close", id="viewer-hint")

    def on_mount(self) -> None:
        self._unsubscribe = self._navigator.subscribe(self._render_state)

    def on_unmount(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        self._navigator.reset()

    def _render_state(self, state: ViewerState) -> None:
        if not state.is_open:
            return
        photo = self._navigator.current_photo()
        if photo is None:
            return
        self.query_one("#viewer-title", Static).update(escape_markup(photo.display_name))
        self.query_one("#viewer-details", Static).update(render_photo_details(photo))
        self.query_one("#viewer-position", Static).update(
            render_position(
                self._navigator.position(),
                is_first=self._navigator.is_first(),
                is_last=self._navigator.is_last(),
            )
        )

    def _apply(self, action: GestureAction) -> None:
        if action is GestureAction.NONE:
            return
        logger.debug("Viewer action: %s", action.value)
        dispatch(self._navigator, action)

    def on_key(self, event: events.Key) -> None:
        action = interpret_key(event.key)
        if action is GestureAction.NONE:
            return
        event.stop()
        event.prevent_default()
        self._apply(action)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self._tracker.press((event.screen_x, event.screen_y))

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if not self._tracker.active:
            return
        self._apply(self._tracker.release((event.screen_x, event.screen_y)))
