"""Photomap REST API calls and response parsing.

Every call accepts an optional shared ``httpx.AsyncClient``; without one a
temporary client is opened for the single request. HTTP and network
failures are translated into the client error taxonomy:

    401 / 403, or a "permission" message      -> PermissionDenied
    404, or a photo-missing message, on an id -> NotFound
    anything else (HTTP, network, JSON)        -> TransportFailure

A missing rating ("Rating not found") and any 5xx stay TransportFailure;
only the photo itself being gone is NotFound.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from photomap_client.errors import NotFound, PermissionDenied, TransportFailure
from photomap_client.models import (
    DEFAULT_ADMIN_CONTACT_EMAIL,
    DEFAULT_PAGE_SIZE,
    FilterCriteria,
    PageInfo,
    Photo,
    PhotoPage,
    PublicSettings,
    RatingResult,
)
from photomap_client.query import criteria_to_params

logger = logging.getLogger(__name__)

PHOTOS_PATH = "/api/photos"
PUBLIC_SETTINGS_PATH = "/api/public/settings"
USER_AGENT = "photomap-client/0.3"

# Exact server messages for a photo that no longer exists (lowercased)
PHOTO_MISSING_MESSAGES = frozenset({"photo not found", "photo not found or access denied"})


# ============================================================================
# Response Parsing
# ============================================================================


def _opt_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


def _opt_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed). Returns None if unparseable."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None


def parse_photo(item: Any) -> Photo | None:
    """Parse one photo object. Returns None when the essential ``id`` is missing."""
    if not isinstance(item, dict):
        return None
    photo_id = _opt_int(item.get("id"))
    if photo_id is None:
        return None

    return Photo(
        id=photo_id,
        filename=_opt_str(item.get("filename")) or "",
        original_filename=_opt_str(item.get("originalFilename")) or "",
        uploaded_at=_opt_str(item.get("uploadedAt")) or "",
        taken_at=parse_timestamp(item.get("takenAt")),
        gps_latitude=_opt_float(item.get("gpsLatitude")),
        gps_longitude=_opt_float(item.get("gpsLongitude")),
        # The server omits averageRating for unrated photos.
        average_rating=_opt_float(item.get("averageRating")) or 0.0,
        total_ratings=_opt_int(item.get("totalRatings")) or 0,
        user_rating=_opt_int(item.get("userRating")),
        file_size=_opt_int(item.get("fileSize")) or 0,
        mime_type=_opt_str(item.get("mimeType")) or "",
        camera_make=_opt_str(item.get("cameraMake")),
        camera_model=_opt_str(item.get("cameraModel")),
    )


def parse_page_info(payload: dict[str, Any], content_len: int) -> PageInfo:
    """Parse paging metadata from either a nested ``page`` object or Spring's flat layout."""
    raw = payload.get("page")
    source = raw if isinstance(raw, dict) else payload
    size = _opt_int(source.get("size"))
    total_elements = _opt_int(source.get("totalElements"))
    total_pages = _opt_int(source.get("totalPages"))
    return PageInfo(
        size=size if size is not None else DEFAULT_PAGE_SIZE,
        number=_opt_int(source.get("number")) or 0,
        total_elements=total_elements if total_elements is not None else content_len,
        total_pages=total_pages if total_pages is not None else (1 if content_len else 0),
    )


def parse_photo_page(payload: Any) -> PhotoPage:
    """Parse a collection response. Invalid items are skipped with a warning."""
    if not isinstance(payload, dict):
        raise TransportFailure("Collection response is not a JSON object")
    raw_content = payload.get("content")
    if not isinstance(raw_content, list):
        raise TransportFailure("Collection response has no content list")

    photos: list[Photo] = []
    for item in raw_content:
        photo = parse_photo(item)
        if photo is None:
            logger.warning("Skipping malformed photo entry: %r", item)
            continue
        photos.append(photo)
    return PhotoPage(content=tuple(photos), page=parse_page_info(payload, len(photos)))


def parse_rating_result(payload: Any, photo_id: int) -> RatingResult:
    if not isinstance(payload, dict):
        raise TransportFailure(f"Rating response for photo {photo_id} is not a JSON object")
    return RatingResult(
        id=_opt_int(payload.get("id")) or 0,
        photo_id=_opt_int(payload.get("photoId")) or photo_id,
        user_id=_opt_int(payload.get("userId")) or 0,
        rating=_opt_int(payload.get("rating")) or 0,
        created_at=_opt_str(payload.get("createdAt")) or "",
    )


def parse_public_settings(payload: Any) -> PublicSettings:
    if not isinstance(payload, dict):
        return PublicSettings()
    email = _opt_str(payload.get("adminContactEmail"))
    return PublicSettings(admin_contact_email=email or DEFAULT_ADMIN_CONTACT_EMAIL)


# ============================================================================
# Transport
# ============================================================================


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the server's error message."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str):
            return message
    return ""


def _is_photo_missing(status: int, lowered_message: str) -> bool:
    if status >= 500:
        return False
    if lowered_message.strip() in PHOTO_MISSING_MESSAGES:
        return True
    return status == 404 and "rating" not in lowered_message


def _translate_status_error(exc: httpx.HTTPStatusError, photo_id: int | None) -> Exception:
    status = exc.response.status_code
    message = _error_message(exc.response)
    lowered = message.lower()
    if status in (401, 403) or "permission" in lowered:
        return PermissionDenied(message or f"HTTP {status}", status_code=status)
    if photo_id is not None and _is_photo_missing(status, lowered):
        return NotFound(photo_id)
    return TransportFailure(message or f"HTTP {status}", status_code=status)


def build_headers(token: str) -> dict[str, str]:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def _send(
    client: httpx.AsyncClient | None,
    method: str,
    url: str,
    *,
    token: str,
    timeout_seconds: float,
    params: dict[str, str] | None = None,
    json_body: dict[str, Any] | None = None,
    photo_id: int | None = None,
) -> httpx.Response:
    """Send one request and raise the mapped client error on failure."""
    headers = build_headers(token)
    try:
        if client is not None:
            response = await client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=timeout_seconds,
            )
        else:
            async with httpx.AsyncClient() as tmp_client:
                response = await tmp_client.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=headers,
                    timeout=timeout_seconds,
                )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise _translate_status_error(exc, photo_id) from exc
    except httpx.HTTPError as exc:
        logger.warning("%s %s failed: %s", method, url, exc)
        raise TransportFailure(f"{method} {url} failed: {exc}") from exc
    return response


def _json(response: httpx.Response, label: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise TransportFailure(f"{label} returned invalid JSON") from exc


def _url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}{path}"


# ============================================================================
# API Functions
# ============================================================================


async def fetch_collection(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    criteria: FilterCriteria,
    token: str = "",
    timeout_seconds: float = 15,
) -> PhotoPage:
    """Fetch the photo collection matching ``criteria``."""
    response = await _send(
        client,
        "GET",
        _url(base_url, PHOTOS_PATH),
        token=token,
        timeout_seconds=timeout_seconds,
        params=criteria_to_params(criteria),
    )
    return parse_photo_page(_json(response, "Photo collection"))


async def fetch_photo(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    photo_id: int,
    token: str = "",
    timeout_seconds: float = 15,
) -> Photo:
    """Fetch the canonical state of a single photo."""
    response = await _send(
        client,
        "GET",
        _url(base_url, f"{PHOTOS_PATH}/{photo_id}"),
        token=token,
        timeout_seconds=timeout_seconds,
        photo_id=photo_id,
    )
    photo = parse_photo(_json(response, f"Photo {photo_id}"))
    if photo is None:
        raise TransportFailure(f"Photo {photo_id} response is missing an id")
    return photo


async def rate_photo(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    photo_id: int,
    rating: int,
    token: str = "",
    timeout_seconds: float = 15,
) -> RatingResult:
    """Set the current user's rating for a photo."""
    response = await _send(
        client,
        "PUT",
        _url(base_url, f"{PHOTOS_PATH}/{photo_id}/rating"),
        token=token,
        timeout_seconds=timeout_seconds,
        json_body={"rating": rating},
        photo_id=photo_id,
    )
    return parse_rating_result(_json(response, f"Rating for photo {photo_id}"), photo_id)


async def clear_rating(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    photo_id: int,
    token: str = "",
    timeout_seconds: float = 15,
) -> None:
    """Remove the current user's rating for a photo."""
    await _send(
        client,
        "DELETE",
        _url(base_url, f"{PHOTOS_PATH}/{photo_id}/rating"),
        token=token,
        timeout_seconds=timeout_seconds,
        photo_id=photo_id,
    )


async def delete_photo(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    photo_id: int,
    token: str = "",
    timeout_seconds: float = 15,
) -> None:
    """Delete a photo permanently."""
    await _send(
        client,
        "DELETE",
        _url(base_url, f"{PHOTOS_PATH}/{photo_id}"),
        token=token,
        timeout_seconds=timeout_seconds,
        photo_id=photo_id,
    )


async def fetch_public_settings(
    *,
    client: httpx.AsyncClient | None,
    base_url: str,
    timeout_seconds: float = 15,
) -> PublicSettings:
    """Fetch unauthenticated server settings (admin contact address)."""
    response = await _send(
        client,
        "GET",
        _url(base_url, PUBLIC_SETTINGS_PATH),
        token="",
        timeout_seconds=timeout_seconds,
    )
    return parse_public_settings(_json(response, "Public settings"))


__all__ = [
    "clear_rating",
    "delete_photo",
    "fetch_collection",
    "fetch_photo",
    "fetch_public_settings",
    "parse_photo",
    "parse_photo_page",
    "parse_public_settings",
    "parse_rating_result",
    "parse_timestamp",
    "rate_photo",
]
