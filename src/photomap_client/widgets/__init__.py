"""Rendering helpers for gallery and viewer widgets."""

from photomap_client.widgets.listing import (
    render_photo_details,
    render_photo_option,
    render_position,
    set_ascii_icons,
)

__all__ = [
    "render_photo_details",
    "render_photo_option",
    "render_position",
    "set_ascii_icons",
]
