"""Tests for service interface adapters and defaults."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from photomap_client.models import FilterCriteria, PhotoPage, PublicSettings, UserConfig
from photomap_client.services.interfaces import (
    AppServices,
    DefaultPhotoApiService,
    PhotoApiService,
    build_default_app_services,
)


def test_build_default_app_services_protocol_compatible() -> None:
    services = build_default_app_services(UserConfig())

    assert isinstance(services, AppServices)
    assert isinstance(services.photo_api, PhotoApiService)
    assert isinstance(services.photo_api, DefaultPhotoApiService)


def test_build_default_app_services_uses_config() -> None:
    config = UserConfig(base_url="http://example.test", api_token="t", request_timeout_seconds=4)

    api = build_default_app_services(config).photo_api

    assert isinstance(api, DefaultPhotoApiService)
    assert api.base_url == "http://example.test"
    assert api.token == "t"
    assert api.timeout_seconds == 4
    assert api.client is None


def test_fake_api_satisfies_protocol(fake_api) -> None:
    assert isinstance(fake_api(), PhotoApiService)


@pytest.mark.asyncio
async def test_default_photo_api_adapter_delegates() -> None:
    api = DefaultPhotoApiService(base_url="http://h", token="tok", timeout_seconds=3)
    criteria = FilterCriteria(min_rating=2)

    with (
        patch(
            "photomap_client.services.interfaces._photo_api.fetch_collection",
            new=AsyncMock(return_value=PhotoPage()),
        ) as fetch,
        patch(
            "photomap_client.services.interfaces._photo_api.rate_photo",
            new=AsyncMock(),
        ) as rate,
        patch(
            "photomap_client.services.interfaces._photo_api.clear_rating",
            new=AsyncMock(),
        ) as clear,
        patch(
            "photomap_client.services.interfaces._photo_api.delete_photo",
            new=AsyncMock(),
        ) as delete,
        patch(
            "photomap_client.services.interfaces._photo_api.fetch_public_settings",
            new=AsyncMock(return_value=PublicSettings("x@example.org")),
        ) as settings,
    ):
        page = await api.fetch_collection(criteria)
        await api.rate_photo(5, 7)
        await api.clear_rating(5)
        await api.delete_photo(5)
        public = await api.fetch_public_settings()

    assert page == PhotoPage()
    fetch.assert_awaited_once_with(
        client=None, base_url="http://h", criteria=criteria, token="tok", timeout_seconds=3
    )
    rate.assert_awaited_once_with(
        client=None, base_url="http://h", photo_id=5, rating=7, token="tok", timeout_seconds=3
    )
    clear.assert_awaited_once()
    delete.assert_awaited_once()
    assert public.admin_contact_email == "x@example.org"
    settings.assert_awaited_once_with(client=None, base_url="http://h", timeout_seconds=3)
