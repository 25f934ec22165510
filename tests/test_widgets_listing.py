"""Focused tests for list rendering helpers."""

from __future__ import annotations

from photomap_client.widgets.listing import (
    format_rating,
    format_stars,
    format_taken_at,
    icon,
    render_photo_details,
    render_photo_option,
    render_position,
    set_ascii_icons,
)


def test_set_ascii_icons_changes_rendered_markers(make_photo) -> None:
    photo = make_photo(average_rating=3, user_rating=3, gps=(1.0, 2.0))

    set_ascii_icons(True)
    ascii_text = render_photo_option(photo)
    assert "***" in ascii_text
    assert "\\[gps]" in ascii_text
    assert icon("gps") == "[gps]"

    set_ascii_icons(False)
    unicode_text = render_photo_option(photo)
    assert "★★★" in unicode_text
    assert "📍" in unicode_text


def test_format_stars_clamps() -> None:
    assert format_stars(0) == ""
    assert format_stars(4.9) == "★★★★"
    assert format_stars(42) == "★" * 10


def test_format_rating(make_photo) -> None:
    assert format_rating(make_photo()) == "unrated"
    assert format_rating(make_photo(average_rating=7.3, total_ratings=1)) == "7.3 (1 vote)"
    assert format_rating(make_photo(average_rating=6, total_ratings=3)) == "6.0 (3 votes)"


def test_format_taken_at(make_photo) -> None:
    assert format_taken_at(make_photo(taken_at=None)) == "date unknown"
    assert format_taken_at(make_photo()) == "2024-06-01 12:00"


def test_render_photo_option_escapes_markup(make_photo) -> None:
    photo = make_photo(original_filename="[red]trip[/red].jpg")

    rendered = render_photo_option(photo)

    assert "\\[red]trip" in rendered


def test_render_photo_details_lists_known_fields(make_photo) -> None:
    photo = make_photo(average_rating=8, user_rating=9, gps=(52.52, 13.405))

    details = render_photo_details(photo)

    assert "Your rating:[/] 9" in details
    assert "52.52000, 13.40500" in details
    assert "Camera" not in details


def test_render_position_edges() -> None:
    assert render_position(None, is_first=False, is_last=False) == ""
    assert render_position((1, 3), is_first=True, is_last=False) == "  1 / 3 ▶"
    assert render_position((3, 3), is_first=False, is_last=True) == "◀ 3 / 3  "
