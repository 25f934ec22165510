"""Translate raw pointer gestures and keys into viewer actions.

Gesture rules for one continuous pointer press (start -> end):

    |dx| < tap and |dy| < tap                  -> CLOSE
    |dx| > |dy| and |dx| > swipe, dx < 0       -> NEXT (leftward drag)
    |dx| > |dy| and |dx| > swipe, dx > 0       -> PREVIOUS
    anything else                              -> NONE

Motion between the two thresholds and vertical-dominant motion are a
deliberate dead zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from photomap_client.models import DEFAULT_SWIPE_THRESHOLD_PX, DEFAULT_TAP_THRESHOLD_PX
from photomap_client.viewer import ViewerNavigator

Point = tuple[float, float]


class GestureAction(Enum):
    NONE = "none"
    CLOSE = "close"
    NEXT = "next"
    PREVIOUS = "previous"


_KEY_ACTIONS: dict[str, GestureAction] = {
    "escape": GestureAction.CLOSE,
    "left": GestureAction.PREVIOUS,
    "right": GestureAction.NEXT,
}


def interpret_gesture(
    start: Point,
    end: Point,
    *,
    tap_threshold: float = DEFAULT_TAP_THRESHOLD_PX,
    swipe_threshold: float = DEFAULT_SWIPE_THRESHOLD_PX,
) -> GestureAction:
    """Classify a pointer gesture from its start and end points."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if abs(dx) < tap_threshold and abs(dy) < tap_threshold:
        return GestureAction.CLOSE
    if abs(dx) > abs(dy) and abs(dx) > swipe_threshold:
        return GestureAction.NEXT if dx < 0 else GestureAction.PREVIOUS
    return GestureAction.NONE


def interpret_key(key: str) -> GestureAction:
    """Map a key name (textual naming: ``escape``, ``left``, ``right``) to an action."""
    return _KEY_ACTIONS.get(key.lower(), GestureAction.NONE)


def dispatch(navigator: ViewerNavigator, action: GestureAction) -> bool:
    """Apply ``action`` to ``navigator``. Returns True when the state changed."""
    if action is GestureAction.CLOSE:
        return navigator.close() is not None
    if action is GestureAction.NEXT:
        return navigator.next()
    if action is GestureAction.PREVIOUS:
        return navigator.previous()
    return False


@dataclass(slots=True)
class GestureTracker:
    """Pairs pointer-down and pointer-up events into one gesture."""

    tap_threshold: float = DEFAULT_TAP_THRESHOLD_PX
    swipe_threshold: float = DEFAULT_SWIPE_THRESHOLD_PX
    _start: Point | None = None

    def press(self, point: Point) -> None:
        self._start = point

    def cancel(self) -> None:
        self._start = None

    @property
    def active(self) -> bool:
        return self._start is not None

    def release(self, point: Point) -> GestureAction:
        """Finish the gesture. A release without a press yields NONE."""
        start, self._start = self._start, None
        if start is None:
            return GestureAction.NONE
        return interpret_gesture(
            start,
            point,
            tap_threshold=self.tap_threshold,
            swipe_threshold=self.swipe_threshold,
        )


__all__ = [
    "GestureAction",
    "GestureTracker",
    "Point",
    "dispatch",
    "interpret_gesture",
    "interpret_key",
]
