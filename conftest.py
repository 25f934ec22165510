"""Shared test fixtures for photomap client tests."""

from __future__ import annotations

import asyncio
import math
from collections import deque
from datetime import datetime
from typing import Any

import pytest

from photomap_client.errors import NotFound
from photomap_client.models import (
    FilterCriteria,
    PageInfo,
    Photo,
    PhotoPage,
    PublicSettings,
    RatingResult,
    UserConfig,
)
from photomap_client.query import filter_photos
from photomap_client.widgets.listing import set_ascii_icons

# ── Module-level state isolation ─────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_icon_set():
    """Restore Unicode icons; PhotomapBrowser.__init__ may switch to ASCII."""
    yield
    set_ascii_icons(False)


# ── Fakes ────────────────────────────────────────────────────────────────────


class FakePhotoApi:
    """In-memory PhotoApiService that filters server-side with the shared predicate.

    ``hold_collection()`` returns an event; the next ``fetch_collection`` call
    waits on it before answering, which lets tests reorder responses.
    ``fail_next_collection(exc)`` makes the next collection call raise.
    """

    def __init__(self, photos: list[Photo] | None = None) -> None:
        self.photos: dict[int, Photo] = {p.id: p for p in photos or []}
        self.other_ratings: dict[int, list[int]] = {}
        self.settings = PublicSettings()
        self.settings_error: Exception | None = None
        self.mutation_error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []
        self._collection_gates: deque[asyncio.Event] = deque()
        self._collection_errors: deque[Exception] = deque()

    def hold_collection(self) -> asyncio.Event:
        gate = asyncio.Event()
        self._collection_gates.append(gate)
        return gate

    def fail_next_collection(self, exc: Exception) -> None:
        self._collection_errors.append(exc)

    async def fetch_collection(self, criteria: FilterCriteria) -> PhotoPage:
        self.calls.append(("fetch_collection", criteria))
        gate = self._collection_gates.popleft() if self._collection_gates else None
        error = self._collection_errors.popleft() if self._collection_errors else None
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if error is not None:
            raise error
        matching = filter_photos(sorted(self.photos.values(), key=lambda p: p.id), criteria)
        start = criteria.page * criteria.size
        content = tuple(matching[start : start + criteria.size])
        return PhotoPage(
            content=content,
            page=PageInfo(
                size=criteria.size,
                number=criteria.page,
                total_elements=len(matching),
                total_pages=math.ceil(len(matching) / criteria.size),
            ),
        )

    async def fetch_photo(self, photo_id: int) -> Photo:
        self.calls.append(("fetch_photo", photo_id))
        await asyncio.sleep(0)
        photo = self.photos.get(photo_id)
        if photo is None:
            raise NotFound(photo_id)
        return photo

    async def rate_photo(self, photo_id: int, rating: int) -> RatingResult:
        self.calls.append(("rate_photo", (photo_id, rating)))
        await asyncio.sleep(0)
        self._check_mutation(photo_id)
        self._set_user_rating(photo_id, rating)
        return RatingResult(id=1, photo_id=photo_id, user_id=1, rating=rating)

    async def clear_rating(self, photo_id: int) -> None:
        self.calls.append(("clear_rating", photo_id))
        await asyncio.sleep(0)
        self._check_mutation(photo_id)
        self._set_user_rating(photo_id, None)

    async def delete_photo(self, photo_id: int) -> None:
        self.calls.append(("delete_photo", photo_id))
        await asyncio.sleep(0)
        self._check_mutation(photo_id)
        del self.photos[photo_id]

    async def fetch_public_settings(self) -> PublicSettings:
        self.calls.append(("fetch_public_settings", None))
        if self.settings_error is not None:
            raise self.settings_error
        return self.settings

    def _check_mutation(self, photo_id: int) -> None:
        if self.mutation_error is not None:
            raise self.mutation_error
        if photo_id not in self.photos:
            raise NotFound(photo_id)

    def _set_user_rating(self, photo_id: int, rating: int | None) -> None:
        others = self.other_ratings.get(photo_id, [])
        votes = others + ([rating] if rating is not None else [])
        average = sum(votes) / len(votes) if votes else 0.0
        self.photos[photo_id] = self.photos[photo_id].with_rating(
            average_rating=average,
            total_ratings=len(votes),
            user_rating=rating,
        )


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_photo():
    """Factory fixture for creating Photo instances with sensible defaults."""

    def _make(
        photo_id: int = 1,
        *,
        average_rating: float = 0.0,
        total_ratings: int | None = None,
        user_rating: int | None = None,
        taken_at: datetime | None = datetime(2024, 6, 1, 12, 0),
        gps: tuple[float, float] | None = None,
        original_filename: str | None = None,
    ) -> Photo:
        if total_ratings is None:
            total_ratings = 1 if average_rating else 0
        return Photo(
            id=photo_id,
            filename=f"{photo_id:04d}.jpg",
            original_filename=original_filename or f"IMG_{photo_id:04d}.jpg",
            uploaded_at="2024-06-02T08:00:00",
            taken_at=taken_at,
            gps_latitude=gps[0] if gps else None,
            gps_longitude=gps[1] if gps else None,
            average_rating=average_rating,
            total_ratings=total_ratings,
            user_rating=user_rating,
            file_size=1024,
            mime_type="image/jpeg",
        )

    return _make


@pytest.fixture
def fake_api():
    """Factory fixture building a FakePhotoApi seeded with the given photos."""

    def _make(photos: list[Photo] | None = None) -> FakePhotoApi:
        return FakePhotoApi(photos)

    return _make


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make
