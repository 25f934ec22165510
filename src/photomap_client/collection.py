"""Collection cache: the locally held, filtered view of the remote photo collection.

The cache owns the photo list. After any sequence of ``load``/``mutate``/
``remove`` it should equal what ``load(criteria)`` would return right now,
except for photos nobody touched since the last load.

Ordering rules:

* Every ``load`` takes a new generation number. A response whose generation
  is no longer current is dropped, so a slow earlier load cannot overwrite a
  faster later one.
* Mutations on the same photo id are serialized with a per-id lock; each one
  moves that photo's entry from its pre-state to its post-state atomically.
  A lock lives only while some mutation holds or awaits it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Coroutine
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any

from photomap_client.errors import NotFound, PermissionDenied, PhotomapError
from photomap_client.filters import FilterStateManager
from photomap_client.models import (
    MAX_RATING,
    MIN_RATING,
    FilterCriteria,
    PageInfo,
    Photo,
    RatingPatch,
)
from photomap_client.notifier import LastValueNotifier, Unsubscribe
from photomap_client.query import matches_criteria
from photomap_client.services.interfaces import PhotoApiService

logger = logging.getLogger(__name__)


class LoadFailurePolicy(Enum):
    """What a failed ``load`` does to the cached content."""

    RETAIN = "never"
    CLEAR_ON_PERMISSION = "permission"
    CLEAR = "always"

    @classmethod
    def from_config(cls, mode: str) -> LoadFailurePolicy:
        """Map a ``clear_on_load_failure`` config value to a policy."""
        try:
            return cls(mode)
        except ValueError:
            return cls.CLEAR_ON_PERMISSION

    def should_clear(self, exc: Exception) -> bool:
        if self is LoadFailurePolicy.CLEAR:
            return True
        if self is LoadFailurePolicy.CLEAR_ON_PERMISSION:
            return isinstance(exc, PermissionDenied)
        return False


class LoadOutcome(Enum):
    APPLIED = "applied"
    STALE = "stale"


class CollectionCache:
    """Cached photo list kept consistent with the active filter criteria."""

    def __init__(
        self,
        api: PhotoApiService,
        *,
        failure_policy: LoadFailurePolicy = LoadFailurePolicy.RETAIN,
    ) -> None:
        self._api = api
        self._failure_policy = failure_policy
        self._notifier: LastValueNotifier[tuple[Photo, ...]] = LastValueNotifier(())
        self._criteria: FilterCriteria | None = None
        self._page_info: PageInfo | None = None
        self._generation = 0
        self._locks: dict[int, asyncio.Lock] = {}
        self._lock_users: dict[int, int] = {}
        self._background_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple[Photo, ...]:
        """Current photos in display order. Immutable; safe to hand out."""
        return self._notifier.value

    @property
    def criteria(self) -> FilterCriteria | None:
        """Criteria of the last applied load (None before the first one)."""
        return self._criteria

    @property
    def page_info(self) -> PageInfo | None:
        return self._page_info

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def failure_policy(self) -> LoadFailurePolicy:
        return self._failure_policy

    def get(self, photo_id: int) -> Photo | None:
        for photo in self.snapshot():
            if photo.id == photo_id:
                return photo
        return None

    def __len__(self) -> int:
        return len(self.snapshot())

    def __contains__(self, photo_id: object) -> bool:
        return any(photo.id == photo_id for photo in self.snapshot())

    def subscribe(self, listener: Callable[[tuple[Photo, ...]], None]) -> Unsubscribe:
        """Subscribe to list changes; the current list is replayed at once."""
        return self._notifier.subscribe(listener)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(
        self,
        criteria: FilterCriteria,
        *,
        failure_policy: LoadFailurePolicy | None = None,
    ) -> LoadOutcome:
        """Fetch the collection for ``criteria`` and replace the cached list.

        On a client error the failure policy decides whether prior content
        is kept or cleared, then the error is re-raised. Responses (and
        failures) of superseded loads are dropped and report ``STALE``.
        """
        self._generation += 1
        generation = self._generation
        policy = failure_policy or self._failure_policy

        try:
            page = await self._api.fetch_collection(criteria)
        except PhotomapError as exc:
            if generation != self._generation:
                logger.debug("Dropping failure of superseded load #%d: %s", generation, exc)
                return LoadOutcome.STALE
            if policy.should_clear(exc):
                logger.info("Load failed (%s); clearing cached photos", exc)
                self._criteria = criteria
                self._page_info = None
                self._publish(())
            raise

        if generation != self._generation:
            logger.debug("Dropping superseded load #%d (current #%d)", generation, self._generation)
            return LoadOutcome.STALE

        self._criteria = criteria
        self._page_info = page.page
        self._publish(_dedupe(page.content))
        logger.debug("Load #%d applied: %d photos", generation, len(self.snapshot()))
        return LoadOutcome.APPLIED

    def bind(
        self,
        filters: FilterStateManager,
        *,
        on_error: Callable[[PhotomapError], None] | None = None,
    ) -> Unsubscribe:
        """Reload whenever ``filters`` publishes; must be called inside a running loop.

        Each publication schedules a load; the newest one wins. Failures are
        logged and passed to ``on_error``.
        """

        async def _load_bound(criteria: FilterCriteria) -> None:
            try:
                await self.load(criteria)
            except PhotomapError as exc:
                logger.warning("Collection load failed: %s", exc)
                if on_error is not None:
                    on_error(exc)

        def _on_filters(criteria: FilterCriteria) -> None:
            self._track_task(_load_bound(criteria))

        return filters.subscribe(_on_filters)

    async def wait_idle(self) -> None:
        """Wait until every load scheduled through ``bind`` has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel loads scheduled through ``bind`` and wait until they have stopped."""
        tasks = list(self._background_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("Collection cache shut down (%d loads cancelled)", len(tasks))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def mutate(self, photo_id: int, patch: RatingPatch) -> Photo | None:
        """Apply a rating mutation, refresh the photo and reconcile it.

        Returns the refreshed photo (whether or not it still matches the
        filter), or None when the photo no longer exists, in which case it
        is removed from the cache. Other errors leave the cache untouched.
        """
        async with self._photo_lock(photo_id):
            try:
                if patch.rating is None:
                    await self._api.clear_rating(photo_id)
                else:
                    await self._api.rate_photo(photo_id, patch.rating)
                refreshed = await self._api.fetch_photo(photo_id)
            except NotFound:
                logger.info("Photo %s vanished during mutation; removing", photo_id)
                self.remove(photo_id)
                return None
            self._reconcile(refreshed)
            return refreshed

    async def rate(self, photo_id: int, rating: int) -> Photo | None:
        """Set the current user's rating (1-10) and reconcile."""
        if isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}, got {rating}")
        return await self.mutate(photo_id, RatingPatch(rating))

    async def clear_rating(self, photo_id: int) -> Photo | None:
        """Clear the current user's rating and reconcile."""
        return await self.mutate(photo_id, RatingPatch(None))

    async def delete(self, photo_id: int) -> None:
        """Delete the photo remotely, then drop it from the cache.

        A photo that is already gone server-side is still removed locally.
        """
        async with self._photo_lock(photo_id):
            try:
                await self._api.delete_photo(photo_id)
            except NotFound:
                logger.info("Photo %s was already deleted", photo_id)
            self.remove(photo_id)

    def remove(self, photo_id: int) -> bool:
        """Drop one photo by id, keeping the order of the rest."""
        current = self.snapshot()
        remaining = tuple(photo for photo in current if photo.id != photo_id)
        if len(remaining) == len(current):
            return False
        self._publish(remaining)
        return True

    def clear(self) -> None:
        """Empty the cached list (e.g. when the criteria became unauthorized)."""
        self._page_info = None
        self._publish(())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reconcile(self, refreshed: Photo) -> None:
        photos = list(self.snapshot())
        index = next((i for i, p in enumerate(photos) if p.id == refreshed.id), None)
        if index is None:
            logger.debug("Photo %s not cached; nothing to reconcile", refreshed.id)
            return
        if self._criteria is None or matches_criteria(refreshed, self._criteria):
            photos[index] = refreshed
        else:
            logger.debug("Photo %s no longer matches filters; removing", refreshed.id)
            del photos[index]
        self._publish(tuple(photos))

    def _publish(self, photos: tuple[Photo, ...]) -> None:
        self._notifier.publish(photos)

    @asynccontextmanager
    async def _photo_lock(self, photo_id: int) -> AsyncIterator[None]:
        lock = self._locks.get(photo_id)
        if lock is None:
            lock = self._locks[photo_id] = asyncio.Lock()
        self._lock_users[photo_id] = self._lock_users.get(photo_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[photo_id] -= 1
            if not self._lock_users[photo_id]:
                del self._lock_users[photo_id]
                del self._locks[photo_id]

    def _track_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.get_running_loop().create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)


def _dedupe(photos: tuple[Photo, ...]) -> tuple[Photo, ...]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[Photo] = []
    for photo in photos:
        if photo.id in seen:
            continue
        seen.add(photo.id)
        unique.append(photo)
    return tuple(unique)


__all__ = ["CollectionCache", "LoadFailurePolicy", "LoadOutcome"]
