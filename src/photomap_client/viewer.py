"""Detail-viewer navigation state machine.

States are ``Closed`` and ``Open(index)``. The navigator borrows the photo
sequence handed to ``open`` and never copies, re-derives or mutates it: later
collection changes are intentionally not observed until the viewer is opened
again.

Environment side effects (hiding the gallery, entering fullscreen, routing
back to the caller) live in ``ViewerHooks`` and run only on state-transition
edges, keeping the state machine itself pure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from photomap_client.errors import InvalidTarget
from photomap_client.models import Photo
from photomap_client.notifier import LastValueNotifier, Unsubscribe

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN_ROUTE = "/"


@dataclass(slots=True, frozen=True)
class ViewerState:
    """Snapshot of the viewer. ``current_index`` is -1 while closed."""

    is_open: bool = False
    photos: Sequence[Photo] = ()
    current_index: int = -1
    origin_route: str = DEFAULT_ORIGIN_ROUTE


CLOSED_VIEWER_STATE = ViewerState()


@dataclass(slots=True)
class ViewerHooks:
    """Side-effect callbacks invoked on state-transition edges."""

    on_enter_open: Callable[[ViewerState], None] | None = None
    on_enter_closed: Callable[[ViewerState], None] | None = None
    navigate: Callable[[str], None] | None = None


class ViewerNavigator:
    """Steps through a frozen photo snapshot and closes back to its origin."""

    def __init__(self, hooks: ViewerHooks | None = None) -> None:
        self._hooks = hooks or ViewerHooks()
        self._notifier: LastValueNotifier[ViewerState] = LastValueNotifier(CLOSED_VIEWER_STATE)

    @property
    def state(self) -> ViewerState:
        return self._notifier.value

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def current_index(self) -> int:
        return self.state.current_index

    def subscribe(self, listener: Callable[[ViewerState], None]) -> Unsubscribe:
        return self._notifier.subscribe(listener)

    def open(self, photos: Sequence[Photo], photo_id: int, origin_route: str) -> ViewerState:
        """Open the viewer on ``photo_id`` within ``photos``.

        Raises InvalidTarget (after logging) when the id is not in
        ``photos``; the current state is left untouched.
        """
        index = next((i for i, photo in enumerate(photos) if photo.id == photo_id), -1)
        if index == -1:
            logger.warning("Photo %s not found in viewer snapshot of %d", photo_id, len(photos))
            raise InvalidTarget(photo_id)

        was_open = self.is_open
        state = ViewerState(
            is_open=True,
            photos=photos,
            current_index=index,
            origin_route=origin_route,
        )
        self._notifier.publish(state)
        if not was_open and self._hooks.on_enter_open is not None:
            self._hooks.on_enter_open(state)
        return state

    def next(self) -> bool:
        """Advance one photo. Clamped at the last photo; returns True if it moved."""
        state = self.state
        if not state.is_open or state.current_index >= len(state.photos) - 1:
            return False
        self._move_to(state.current_index + 1)
        return True

    def previous(self) -> bool:
        """Go back one photo. Clamped at the first photo; returns True if it moved."""
        state = self.state
        if not state.is_open or state.current_index <= 0:
            return False
        self._move_to(state.current_index - 1)
        return True

    def close(self) -> str | None:
        """Close the viewer and hand control back to the origin route.

        Returns the origin route, or None if the viewer was already closed.
        """
        state = self.state
        if not state.is_open:
            return None
        self._notifier.publish(CLOSED_VIEWER_STATE)
        if self._hooks.on_enter_closed is not None:
            self._hooks.on_enter_closed(CLOSED_VIEWER_STATE)
        if self._hooks.navigate is not None:
            self._hooks.navigate(state.origin_route)
        return state.origin_route

    def reset(self) -> None:
        """Drop to the closed state without running hooks (used on teardown)."""
        if self.is_open:
            self._notifier.publish(CLOSED_VIEWER_STATE)

    def is_first(self) -> bool:
        return self.state.current_index == 0

    def is_last(self) -> bool:
        state = self.state
        return state.is_open and state.current_index == len(state.photos) - 1

    def current_photo(self) -> Photo | None:
        state = self.state
        if not state.is_open or not 0 <= state.current_index < len(state.photos):
            return None
        return state.photos[state.current_index]

    def position(self) -> tuple[int, int] | None:
        """One-based ``(n, m)`` for "photo n of m", or None while closed."""
        state = self.state
        if not state.is_open:
            return None
        return state.current_index + 1, len(state.photos)

    def position_label(self) -> str:
        position = self.position()
        if position is None:
            return ""
        return f"{position[0]} / {position[1]}"

    def _move_to(self, index: int) -> None:
        state = self.state
        self._notifier.publish(
            ViewerState(
                is_open=True,
                photos=state.photos,
                current_index=index,
                origin_route=state.origin_route,
            )
        )


__all__ = [
    "CLOSED_VIEWER_STATE",
    "DEFAULT_ORIGIN_ROUTE",
    "ViewerHooks",
    "ViewerNavigator",
    "ViewerState",
]
