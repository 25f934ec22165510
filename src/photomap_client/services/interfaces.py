"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from photomap_client.models import (
    FilterCriteria,
    Photo,
    PhotoPage,
    PublicSettings,
    RatingResult,
    UserConfig,
)
from photomap_client.services import photo_api_service as _photo_api


@runtime_checkable
class PhotoApiService(Protocol):
    """Port for fetching and mutating photos on the remote collection."""

    async def fetch_collection(self, criteria: FilterCriteria) -> PhotoPage:
        """Fetch the collection matching ``criteria``."""
        ...

    async def fetch_photo(self, photo_id: int) -> Photo:
        """Fetch one photo's canonical state (raises NotFound if gone)."""
        ...

    async def rate_photo(self, photo_id: int, rating: int) -> RatingResult:
        """Set the current user's rating."""
        ...

    async def clear_rating(self, photo_id: int) -> None:
        """Clear the current user's rating."""
        ...

    async def delete_photo(self, photo_id: int) -> None:
        """Delete a photo."""
        ...

    async def fetch_public_settings(self) -> PublicSettings:
        """Fetch unauthenticated server settings."""
        ...


class DefaultPhotoApiService:
    """Default adapter that delegates to the function-based REST calls.

    Holds the connection settings so callers only pass domain arguments.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: str = "",
        timeout_seconds: float = 15,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.token = token
        self.timeout_seconds = timeout_seconds
        self.client = client

    async def fetch_collection(self, criteria: FilterCriteria) -> PhotoPage:
        return await _photo_api.fetch_collection(
            client=self.client,
            base_url=self.base_url,
            criteria=criteria,
            token=self.token,
            timeout_seconds=self.timeout_seconds,
        )

    async def fetch_photo(self, photo_id: int) -> Photo:
        return await _photo_api.fetch_photo(
            client=self.client,
            base_url=self.base_url,
            photo_id=photo_id,
            token=self.token,
            timeout_seconds=self.timeout_seconds,
        )

    async def rate_photo(self, photo_id: int, rating: int) -> RatingResult:
        return await _photo_api.rate_photo(
            client=self.client,
            base_url=self.base_url,
            photo_id=photo_id,
            rating=rating,
            token=self.token,
            timeout_seconds=self.timeout_seconds,
        )

    async def clear_rating(self, photo_id: int) -> None:
        await _photo_api.clear_rating(
            client=self.client,
            base_url=self.base_url,
            photo_id=photo_id,
            token=self.token,
            timeout_seconds=self.timeout_seconds,
        )

    async def delete_photo(self, photo_id: int) -> None:
        await _photo_api.delete_photo(
            client=self.client,
            base_url=self.base_url,
            photo_id=photo_id,
            token=self.token,
            timeout_seconds=self.timeout_seconds,
        )

    async def fetch_public_settings(self) -> PublicSettings:
        return await _photo_api.fetch_public_settings(
            client=self.client,
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    photo_api: PhotoApiService


def build_default_app_services(
    config: UserConfig,
    client: httpx.AsyncClient | None = None,
) -> AppServices:
    """Build default app services from the user configuration."""
    return AppServices(
        photo_api=DefaultPhotoApiService(
            base_url=config.base_url,
            token=config.api_token,
            timeout_seconds=config.request_timeout_seconds,
            client=client,
        )
    )


__all__ = [
    "AppServices",
    "DefaultPhotoApiService",
    "PhotoApiService",
    "build_default_app_services",
]
