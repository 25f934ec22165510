"""Tests for gesture and key interpretation."""

from __future__ import annotations

import pytest

from photomap_client.gestures import (
    GestureAction,
    GestureTracker,
    dispatch,
    interpret_gesture,
    interpret_key,
)
from photomap_client.viewer import ViewerNavigator


@pytest.mark.parametrize(
    ("end", "expected"),
    [
        ((-100, 0), GestureAction.NEXT),
        ((100, 0), GestureAction.PREVIOUS),
        ((30, 0), GestureAction.NONE),
        ((3, 4), GestureAction.CLOSE),
        ((0, 0), GestureAction.CLOSE),
        ((60, 90), GestureAction.NONE),
        ((-60, 5), GestureAction.NEXT),
    ],
)
def test_interpret_gesture_default_thresholds(end, expected) -> None:
    assert interpret_gesture((0, 0), end) is expected


def test_interpret_gesture_boundaries_are_exclusive() -> None:
    assert interpret_gesture((0, 0), (10, 0)) is GestureAction.NONE
    assert interpret_gesture((0, 0), (50, 0)) is GestureAction.NONE
    assert interpret_gesture((0, 0), (51, 0)) is GestureAction.PREVIOUS


def test_interpret_gesture_custom_thresholds() -> None:
    action = interpret_gesture((5, 5), (1, 5), tap_threshold=1, swipe_threshold=3)

    assert action is GestureAction.NEXT


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("escape", GestureAction.CLOSE),
        ("left", GestureAction.PREVIOUS),
        ("right", GestureAction.NEXT),
        ("Escape", GestureAction.CLOSE),
        ("enter", GestureAction.NONE),
    ],
)
def test_interpret_key(key, expected) -> None:
    assert interpret_key(key) is expected


def test_dispatch_drives_navigator(make_photo) -> None:
    navigator = ViewerNavigator()
    navigator.open([make_photo(1), make_photo(2)], 1, "/gallery")

    assert dispatch(navigator, GestureAction.NEXT) is True
    assert dispatch(navigator, GestureAction.NEXT) is False
    assert dispatch(navigator, GestureAction.PREVIOUS) is True
    assert dispatch(navigator, GestureAction.NONE) is False
    assert dispatch(navigator, GestureAction.CLOSE) is True
    assert not navigator.is_open


def test_tracker_pairs_press_and_release() -> None:
    tracker = GestureTracker()

    assert tracker.release((0, 0)) is GestureAction.NONE

    tracker.press((200, 10))
    assert tracker.active
    assert tracker.release((90, 12)) is GestureAction.NEXT
    assert not tracker.active


def test_tracker_cancel_discards_press() -> None:
    tracker = GestureTracker()
    tracker.press((0, 0))
    tracker.cancel()

    assert tracker.release((0, 0)) is GestureAction.NONE
