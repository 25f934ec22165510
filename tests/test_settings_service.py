"""Tests for isolated auxiliary fetches."""

from __future__ import annotations

import asyncio

import pytest

from photomap_client.errors import TransportFailure
from photomap_client.models import DEFAULT_ADMIN_CONTACT_EMAIL, PublicSettings
from photomap_client.services.settings_service import gather_isolated, load_public_settings


async def _value(value, delay: float = 0):
    await asyncio.sleep(delay)
    return value


async def _fail(exc: Exception):
    await asyncio.sleep(0)
    raise exc


@pytest.mark.asyncio
async def test_gather_isolated_keeps_successes_when_one_fails() -> None:
    results = await gather_isolated(
        settings=_value("ok"),
        stats=_fail(TransportFailure("down")),
        other=_value(3, 0.01),
    )

    assert results["settings"].ok
    assert results["settings"].value == "ok"
    assert not results["stats"].ok
    assert isinstance(results["stats"].error, TransportFailure)
    assert results["other"].value == 3


@pytest.mark.asyncio
async def test_gather_isolated_propagates_cancellation() -> None:
    with pytest.raises(asyncio.CancelledError):
        await gather_isolated(cancelled=_fail_cancelled())


async def _fail_cancelled():
    raise asyncio.CancelledError


@pytest.mark.asyncio
async def test_load_public_settings_success(fake_api) -> None:
    api = fake_api()
    api.settings = PublicSettings("admin@example.org")

    assert (await load_public_settings(api)).admin_contact_email == "admin@example.org"


@pytest.mark.asyncio
async def test_load_public_settings_falls_back_on_error(fake_api) -> None:
    api = fake_api()
    api.settings_error = TransportFailure("unreachable")

    settings = await load_public_settings(api)

    assert settings.admin_contact_email == DEFAULT_ADMIN_CONTACT_EMAIL
