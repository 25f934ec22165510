"""Filter predicate and collection query helpers.

``matches_criteria`` is the single definition of "would the current filter
return this photo". The collection cache uses it to reconcile mutated photos,
so it must agree with what the server applies for a fresh load.
"""

from __future__ import annotations

from collections.abc import Iterable

from photomap_client.models import FilterCriteria, Photo


def matches_min_rating(photo: Photo, criteria: FilterCriteria) -> bool:
    if criteria.min_rating is None:
        return True
    # Unrated photos carry average 0 and fail any positive threshold.
    return (photo.average_rating or 0.0) >= criteria.min_rating


def matches_gps(photo: Photo, criteria: FilterCriteria) -> bool:
    if criteria.has_gps is None:
        return True
    return photo.has_gps is criteria.has_gps


def matches_date_range(photo: Photo, criteria: FilterCriteria) -> bool:
    """Inclusive calendar-day bounds on ``taken_at``.

    Photos without ``taken_at`` are exempt from date constraints.
    """
    if photo.taken_at is None:
        return True
    taken_day = photo.taken_at.date()
    if criteria.date_from is not None and taken_day < criteria.date_from:
        return False
    return not (criteria.date_to is not None and taken_day > criteria.date_to)


def matches_criteria(photo: Photo, criteria: FilterCriteria) -> bool:
    """Return True when ``photo`` satisfies every constraint in ``criteria``."""
    return (
        matches_min_rating(photo, criteria)
        and matches_gps(photo, criteria)
        and matches_date_range(photo, criteria)
    )


def filter_photos(photos: Iterable[Photo], criteria: FilterCriteria) -> list[Photo]:
    """Keep photos matching ``criteria``, preserving order."""
    return [photo for photo in photos if matches_criteria(photo, criteria)]


def photos_with_gps(photos: Iterable[Photo]) -> list[Photo]:
    return [photo for photo in photos if photo.has_gps]


def gps_bounds(photos: Iterable[Photo]) -> tuple[float, float, float, float] | None:
    """Bounding box ``(min_lat, min_lon, max_lat, max_lon)`` of geotagged photos.

    Returns None when no photo has coordinates.
    """
    located = photos_with_gps(photos)
    if not located:
        return None
    lats = [p.gps_latitude for p in located if p.gps_latitude is not None]
    lons = [p.gps_longitude for p in located if p.gps_longitude is not None]
    return min(lats), min(lons), max(lats), max(lons)


def criteria_to_params(criteria: FilterCriteria) -> dict[str, str]:
    """Build collection query parameters; absent constraints are not sent."""
    params: dict[str, str] = {}
    for key, value in criteria.as_dict().items():
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = str(value)
    return params


def format_criteria_label(criteria: FilterCriteria) -> str:
    """Short human-readable summary of the active constraints."""
    parts: list[str] = []
    if criteria.date_from is not None or criteria.date_to is not None:
        start = criteria.date_from.isoformat() if criteria.date_from else "…"
        end = criteria.date_to.isoformat() if criteria.date_to else "…"
        parts.append(f"{start} → {end}")
    if criteria.min_rating is not None:
        parts.append(f"rating ≥ {criteria.min_rating}")
    if criteria.has_gps is True:
        parts.append("with GPS")
    elif criteria.has_gps is False:
        parts.append("without GPS")
    return ", ".join(parts) if parts else "All photos"


__all__ = [
    "criteria_to_params",
    "filter_photos",
    "format_criteria_label",
    "gps_bounds",
    "matches_criteria",
    "matches_date_range",
    "matches_gps",
    "matches_min_rating",
    "photos_with_gps",
]
