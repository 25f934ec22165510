"""Auxiliary fetches whose failures must stay isolated from each other."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from photomap_client.errors import PhotomapError
from photomap_client.models import PublicSettings
from photomap_client.services.interfaces import PhotoApiService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IsolatedResult:
    """Outcome of one independent fetch: a value or the error that replaced it."""

    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_isolated(**fetches: Awaitable[Any]) -> dict[str, IsolatedResult]:
    """Run independent fetches concurrently, reporting each failure separately.

    One failing fetch never cancels or hides the others.
    """
    names = list(fetches)
    results = await asyncio.gather(*fetches.values(), return_exceptions=True)
    outcome: dict[str, IsolatedResult] = {}
    for name, result in zip(names, results, strict=True):
        if isinstance(result, Exception):
            logger.warning("Auxiliary fetch %s failed: %s", name, result)
            outcome[name] = IsolatedResult(error=result)
        elif isinstance(result, BaseException):
            raise result
        else:
            outcome[name] = IsolatedResult(value=result)
    return outcome


async def load_public_settings(api: PhotoApiService) -> PublicSettings:
    """Fetch public settings, falling back to defaults on any client error."""
    try:
        return await api.fetch_public_settings()
    except PhotomapError as exc:
        logger.info("Public settings unavailable, using defaults: %s", exc)
        return PublicSettings()


__all__ = ["IsolatedResult", "gather_isolated", "load_public_settings"]
