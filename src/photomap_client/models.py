"""Data models and constants for the photomap client."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any

# Application identity: single source of truth for platformdirs config paths
CONFIG_APP_NAME = "photomap-client"

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_SORT = "uploadedAt,desc"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15
DEFAULT_ADMIN_CONTACT_EMAIL = "admin@photomap.local"

MIN_RATING = 1
MAX_RATING = 10

# Viewer gesture thresholds, in pixels (terminal cells in the TUI)
DEFAULT_TAP_THRESHOLD_PX = 10
DEFAULT_SWIPE_THRESHOLD_PX = 50

# When a collection load fails: keep stale content, clear only on
# authorization failures, or always clear.
LOAD_FAILURE_MODES = ("never", "permission", "always")

# Filter fields that narrow the collection (page/size/sort only shape it)
CONSTRAINT_FIELDS = ("date_from", "date_to", "min_rating", "has_gps")

# snake_case field name -> wire (camelCase) name
FILTER_WIRE_NAMES: dict[str, str] = {
    "date_from": "dateFrom",
    "date_to": "dateTo",
    "min_rating": "minRating",
    "has_gps": "hasGps",
    "page": "page",
    "size": "size",
    "sort": "sort",
}


@dataclass(slots=True, frozen=True)
class FilterCriteria:
    """Active filter criteria for a collection query.

    ``None`` on an optional field means the constraint is absent. ``0`` and
    ``False`` are real values and never mean "absent".
    """

    date_from: date | None = None
    date_to: date | None = None
    min_rating: int | None = None
    has_gps: bool | None = None
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: str = DEFAULT_SORT

    def as_dict(self) -> dict[str, Any]:
        """Return present fields keyed by wire name; absent constraints have no key."""
        result: dict[str, Any] = {}
        for name, wire_name in FILTER_WIRE_NAMES.items():
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, date):
                value = value.isoformat()
            result[wire_name] = value
        return result

    def with_page(self, page: int) -> FilterCriteria:
        return replace(self, page=page)


DEFAULT_FILTERS = FilterCriteria()


@dataclass(slots=True, frozen=True)
class Photo:
    """A photo entity as returned by the photomap API.

    ``id`` is the stable identity. Rating fields change through mutations; a
    changed photo is always a new instance.
    """

    id: int
    filename: str = ""
    original_filename: str = ""
    uploaded_at: str = ""
    taken_at: datetime | None = None
    gps_latitude: float | None = None
    gps_longitude: float | None = None
    average_rating: float = 0.0
    total_ratings: int = 0
    user_rating: int | None = None
    file_size: int = 0
    mime_type: str = ""
    camera_make: str | None = None
    camera_model: str | None = None

    @property
    def has_gps(self) -> bool:
        return self.gps_latitude is not None and self.gps_longitude is not None

    @property
    def display_name(self) -> str:
        return self.original_filename or self.filename or f"photo #{self.id}"

    def with_rating(
        self,
        *,
        average_rating: float,
        total_ratings: int,
        user_rating: int | None,
    ) -> Photo:
        """Return a copy with updated rating fields."""
        return replace(
            self,
            average_rating=average_rating,
            total_ratings=total_ratings,
            user_rating=user_rating,
        )


@dataclass(slots=True, frozen=True)
class PageInfo:
    """Server-side paging metadata for a collection response."""

    size: int = DEFAULT_PAGE_SIZE
    number: int = 0
    total_elements: int = 0
    total_pages: int = 0


@dataclass(slots=True, frozen=True)
class PhotoPage:
    """One collection response: photos in display order plus paging info."""

    content: tuple[Photo, ...] = ()
    page: PageInfo = field(default_factory=PageInfo)


@dataclass(slots=True, frozen=True)
class RatingResult:
    """Acknowledgement of a rating write."""

    id: int
    photo_id: int
    user_id: int
    rating: int
    created_at: str = ""


@dataclass(slots=True, frozen=True)
class RatingPatch:
    """A rating mutation: a concrete value, or ``None`` to clear the user's rating."""

    rating: int | None


@dataclass(slots=True, frozen=True)
class PublicSettings:
    """Unauthenticated server settings shown in the UI."""

    admin_contact_email: str = DEFAULT_ADMIN_CONTACT_EMAIL


@dataclass(slots=True)
class UserConfig:
    """Client configuration persisted between runs."""

    base_url: str = DEFAULT_BASE_URL
    api_token: str = ""  # Optional bearer token; never acquired by this client
    page_size: int = DEFAULT_PAGE_SIZE
    default_sort: str = DEFAULT_SORT
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS
    tap_threshold_px: int = DEFAULT_TAP_THRESHOLD_PX
    swipe_threshold_px: int = DEFAULT_SWIPE_THRESHOLD_PX
    clear_on_load_failure: str = "permission"  # one of LOAD_FAILURE_MODES
    ascii_icons: bool = False
    version: int = 1

    def default_filters(self) -> FilterCriteria:
        """Filter defaults derived from this configuration."""
        return FilterCriteria(size=self.page_size, sort=self.default_sort)
