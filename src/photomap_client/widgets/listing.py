"""Rendering helpers for photo list entries and the viewer detail pane."""

from __future__ import annotations

from rich.markup import escape as escape_markup

from photomap_client.models import MAX_RATING, Photo

_ICON_SETS: dict[str, dict[str, str]] = {
    "unicode": {
        "star": "★",
        "gps": "📍",
        "mine": "●",
        "prev": "◀",
        "next": "▶",
    },
    "ascii": {
        "star": "*",
        "gps": "[gps]",
        "mine": "[me]",
        "prev": "<",
        "next": ">",
    },
}
_ACTIVE_ICON_SET = _ICON_SETS["unicode"]


def set_ascii_icons(enabled: bool) -> None:
    """Switch list indicators between Unicode and ASCII modes."""
    global _ACTIVE_ICON_SET
    _ACTIVE_ICON_SET = _ICON_SETS["ascii"] if enabled else _ICON_SETS["unicode"]


def icon(name: str) -> str:
    return _ACTIVE_ICON_SET[name]


def format_stars(average_rating: float) -> str:
    """One star per whole rating point; empty for unrated photos."""
    full = max(0, min(int(average_rating), MAX_RATING))
    return _ACTIVE_ICON_SET["star"] * full


def format_rating(photo: Photo) -> str:
    if photo.total_ratings == 0 or photo.average_rating <= 0:
        return "unrated"
    votes = "vote" if photo.total_ratings == 1 else "votes"
    return f"{photo.average_rating:.1f} ({photo.total_ratings} {votes})"


def format_taken_at(photo: Photo) -> str:
    if photo.taken_at is None:
        return "date unknown"
    return photo.taken_at.strftime("%Y-%m-%d %H:%M")


def render_photo_option(photo: Photo) -> str:
    """Render a single photo as Rich markup for OptionList."""
    parts = [f"[bold]{escape_markup(photo.display_name)}[/]"]
    stars = format_stars(photo.average_rating)
    if stars:
        parts.append(f"[yellow]{stars}[/]")
    if photo.user_rating is not None:
        parts.append(f"[green]{escape_markup(_ACTIVE_ICON_SET['mine'])} {photo.user_rating}[/]")
    if photo.has_gps:
        parts.append(escape_markup(_ACTIVE_ICON_SET["gps"]))
    return "  ".join(parts) + f"\n  [dim]{format_taken_at(photo)} · {format_rating(photo)}[/]"


def render_photo_details(photo: Photo) -> str:
    """Multi-line Rich markup describing one photo in the viewer."""
    lines = [
        f"[bold]Taken:[/] {format_taken_at(photo)}",
        f"[bold]Rating:[/] {format_rating(photo)} {format_stars(photo.average_rating)}",
    ]
    if photo.user_rating is not None:
        lines.append(f"[bold]Your rating:[/] {photo.user_rating}")
    camera = " ".join(part for part in (photo.camera_make, photo.camera_model) if part)
    if camera:
        lines.append(f"[bold]Camera:[/] {escape_markup(camera)}")
    if photo.has_gps:
        lines.append(f"[bold]Location:[/] {photo.gps_latitude:.5f}, {photo.gps_longitude:.5f}")
    if photo.uploaded_at:
        lines.append(f"[dim]Uploaded {escape_markup(photo.uploaded_at)}[/]")
    return "\n".join(lines)


def render_position(position: tuple[int, int] | None, *, is_first: bool, is_last: bool) -> str:
    """Position line with edge-aware navigation arrows, e.g. ``◀ 3 / 9 ▶``."""
    if position is None:
        return ""
    prev_marker = " " if is_first else _ACTIVE_ICON_SET["prev"]
    next_marker = " " if is_last else _ACTIVE_ICON_SET["next"]
    return f"{prev_marker} {position[0]} / {position[1]} {next_marker}"


__all__ = [
    "format_rating",
    "format_stars",
    "format_taken_at",
    "icon",
    "render_photo_details",
    "render_photo_option",
    "render_position",
    "set_ascii_icons",
]
