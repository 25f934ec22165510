"""Textual application: gallery list, filters, rating actions and fullscreen viewer."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from rich.markup import escape as escape_markup
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Footer, Header, Label, OptionList, Static
from textual.widgets.option_list import Option

from photomap_client.action_messages import (
    build_actionable_success,
    build_clear_rating_confirmation_prompt,
    build_delete_confirmation_prompt,
    build_load_error,
    build_mutation_error,
)
from photomap_client.collection import CollectionCache, LoadFailurePolicy
from photomap_client.errors import InvalidTarget, PhotomapError
from photomap_client.filters import FilterStateManager
from photomap_client.models import FilterCriteria, Photo, PublicSettings, UserConfig
from photomap_client.modals import ConfirmModal, FilterModal, PhotoViewerScreen, RatingModal
from photomap_client.notifier import Unsubscribe
from photomap_client.query import format_criteria_label
from photomap_client.services.interfaces import (
    AppServices,
    DefaultPhotoApiService,
    build_default_app_services,
)
from photomap_client.services.settings_service import gather_isolated, load_public_settings
from photomap_client.ui_constants import APP_BINDINGS, APP_CSS, CELL_WIDTH_PX, GALLERY_ROUTE
from photomap_client.viewer import ViewerHooks, ViewerNavigator, ViewerState
from photomap_client.widgets import listing as _widget_listing
from photomap_client.widgets.listing import render_photo_details, render_photo_option

logger = logging.getLogger(__name__)


def _px_to_cells(px: int) -> float:
    return max(1.0, px / CELL_WIDTH_PX)


def _markup_name(photo: Photo) -> str:
    return escape_markup(photo.display_name)


class PhotomapBrowser(App):
    """A TUI application to browse, filter and rate a photomap collection."""

    TITLE = "Photomap"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        services: AppServices | None = None,
        ascii_icons: bool = False,
    ) -> None:
        super().__init__()
        self._config = config or UserConfig()
        self._services: AppServices = services or build_default_app_services(self._config)
        self._settings = PublicSettings()

        self._filter_state = FilterStateManager(self._config.default_filters())
        self._cache = CollectionCache(
            self._services.photo_api,
            failure_policy=LoadFailurePolicy.from_config(self._config.clear_on_load_failure),
        )
        self._navigator = ViewerNavigator(
            ViewerHooks(
                on_enter_open=self._on_viewer_opened,
                on_enter_closed=self._on_viewer_closed,
                navigate=self._navigate,
            )
        )
        self._unsubscribers: list[Unsubscribe] = []

        # Background task tracking (prevent GC of fire-and-forget tasks)
        self._background_tasks: set[asyncio.Task[None]] = set()

        # Shared HTTP client for connection pooling (created in on_mount)
        self._http_client: httpx.AsyncClient | None = None

        _widget_listing.set_ascii_icons(ascii_icons or self._config.ascii_icons)

    @property
    def filters(self) -> FilterStateManager:
        return self._filter_state

    @property
    def cache(self) -> CollectionCache:
        return self._cache

    @property
    def navigator(self) -> ViewerNavigator:
        return self._navigator

    @property
    def public_settings(self) -> PublicSettings:
        return self._settings

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="list-pane"):
                yield Label(" Photos", id="list-header")
                yield OptionList(id="photo-list")
                yield Label("", id="status-bar")
            with VerticalScroll(id="detail-pane"):
                yield Static("Select a photo to see its details.", id="photo-details")
        yield Footer()

    def on_mount(self) -> None:
        """Wire state managers to the UI and start the first load."""
        photo_api = self._services.photo_api
        if isinstance(photo_api, DefaultPhotoApiService) and photo_api.client is None:
            self._http_client = httpx.AsyncClient()
            photo_api.client = self._http_client

        self._unsubscribers.append(self._cache.subscribe(self._on_photos_changed))
        self._unsubscribers.append(self._filter_state.subscribe(self._on_filters_changed))
        self._unsubscribers.append(self._cache.bind(self._filter_state, on_error=self._on_load_error))
        self._track_task(self._load_settings())
        self.query_one("#photo-list", OptionList).focus()

    async def on_unmount(self) -> None:
        """Detach subscriptions, cancel background work and close the HTTP client."""
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
        self._navigator.reset()
        await self._cache.shutdown()

        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
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

    async def _load_settings(self) -> None:
        results = await gather_isolated(settings=load_public_settings(self._services.photo_api))
        outcome = results["settings"]
        if outcome.ok and isinstance(outcome.value, PublicSettings):
            self._settings = outcome.value

    # ------------------------------------------------------------------
    # State listeners
    # ------------------------------------------------------------------

    def _on_photos_changed(self, photos: tuple[Photo, ...]) -> None:
        option_list = self.query_one("#photo-list", OptionList)
        previous = self._highlighted_photo_id()
        option_list.clear_options()
        option_list.add_options(
            [Option(render_photo_option(photo), id=str(photo.id)) for photo in photos]
        )
        if photos:
            index = next((i for i, p in enumerate(photos) if p.id == previous), 0)
            option_list.highlighted = index
        else:
            self.query_one("#photo-details", Static).update("No photos match these filters.")
        self._update_status_bar()

    def _on_filters_changed(self, criteria: FilterCriteria) -> None:
        count = self._filter_state.active_filter_count()
        label = format_criteria_label(criteria)
        self.sub_title = f"{label} ({count} active)" if count else label
        self.query_one("#list-header", Label).update(f" Photos · {label}")

    def _on_load_error(self, exc: PhotomapError) -> None:
        self.notify(
            build_load_error(exc, self._settings.admin_contact_email),
            title="Load",
            severity="error",
            timeout=8,
        )
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        photos = self._cache.snapshot()
        page = self._cache.page_info
        text = f" {len(photos)} photos"
        if page is not None and page.total_pages > 0:
            text += f" · page {page.number + 1} / {page.total_pages} ({page.total_elements} total)"
        self.query_one("#status-bar", Label).update(text)

    # ------------------------------------------------------------------
    # Viewer hooks
    # ------------------------------------------------------------------

    def _on_viewer_opened(self, state: ViewerState) -> None:
        logger.debug("Viewer opened at index %d of %d", state.current_index, len(state.photos))
        self.push_screen(
            PhotoViewerScreen(
                self._navigator,
                tap_threshold=_px_to_cells(self._config.tap_threshold_px),
                swipe_threshold=_px_to_cells(self._config.swipe_threshold_px),
            )
        )

    def _on_viewer_closed(self, state: ViewerState) -> None:
        if isinstance(self.screen, PhotoViewerScreen):
            self.pop_screen()

    def _navigate(self, route: str) -> None:
        logger.debug("Returning to %s", route)
        if route == GALLERY_ROUTE:
            self.query_one("#photo-list", OptionList).focus()

    # ------------------------------------------------------------------
    # Gallery events
    # ------------------------------------------------------------------

    def _highlighted_photo_id(self) -> int | None:
        option_list = self.query_one("#photo-list", OptionList)
        index = option_list.highlighted
        if index is None or index >= option_list.option_count:
            return None
        option_id = option_list.get_option_at_index(index).id
        return int(option_id) if option_id is not None else None

    def _get_current_photo(self) -> Photo | None:
        """Photo under the viewer when it is open, else the highlighted list entry."""
        if self._navigator.is_open:
            return self._navigator.current_photo()
        photo_id = self._highlighted_photo_id()
        return self._cache.get(photo_id) if photo_id is not None else None

    @on(OptionList.OptionHighlighted, "#photo-list")
    def on_photo_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        photo_id = event.option.id
        photo = self._cache.get(int(photo_id)) if photo_id is not None else None
        if photo is not None:
            self.query_one("#photo-details", Static).update(render_photo_details(photo))

    @on(OptionList.OptionSelected, "#photo-list")
    def on_photo_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is None:
            return
        try:
            self._navigator.open(self._cache.snapshot(), int(event.option.id), GALLERY_ROUTE)
        except InvalidTarget:
            self.notify("That photo is no longer in the gallery", severity="warning")

    # ------------------------------------------------------------------
    # Filter actions
    # ------------------------------------------------------------------

    def action_edit_filters(self) -> None:
        def on_filters_edited(partial: dict[str, Any] | None) -> None:
            if partial is None:
                return
            try:
                self._filter_state.apply(partial)
            except ValueError as exc:
                self.notify(str(exc), title="Filters", severity="warning")

        self.push_screen(FilterModal(self._filter_state.current()), on_filters_edited)

    def action_clear_filters(self) -> None:
        if not self._filter_state.has_active_filters():
            self.notify("No filters to clear", title="Filters")
            return
        self._filter_state.clear()
        self.notify("Filters cleared", title="Filters")

    def action_reload(self) -> None:
        self._track_task(self._reload())

    async def _reload(self) -> None:
        try:
            await self._cache.load(self._filter_state.current())
        except PhotomapError as exc:
            self._on_load_error(exc)

    def action_next_page(self) -> None:
        page = self._cache.page_info
        current = self._filter_state.current()
        if page is None or current.page + 1 >= page.total_pages:
            self.notify("Already on the last page", title="Pages")
            return
        self._filter_state.set_page(current.page + 1)

    def action_previous_page(self) -> None:
        current = self._filter_state.current()
        if current.page == 0:
            self.notify("Already on the first page", title="Pages")
            return
        self._filter_state.set_page(current.page - 1)

    # ------------------------------------------------------------------
    # Photo mutations
    # ------------------------------------------------------------------

    def action_rate_photo(self) -> None:
        photo = self._get_current_photo()
        if photo is None:
            self.notify("No photo selected", title="Rate", severity="warning")
            return

        def on_rating_chosen(rating: int | None) -> None:
            if rating is not None:
                self._track_task(self._rate_photo(photo, rating))

        self.push_screen(RatingModal(_markup_name(photo), photo.user_rating), on_rating_chosen)

    async def _rate_photo(self, photo: Photo, rating: int) -> None:
        try:
            refreshed = await self._cache.rate(photo.id, rating)
        except PhotomapError as exc:
            self.notify(build_mutation_error("rate photo", exc), title="Rate", severity="error")
            return
        if refreshed is None:
            self.notify(f"{_markup_name(photo)} no longer exists", title="Rate", severity="warning")
            return
        self.notify(
            build_actionable_success(
                f"Rated {_markup_name(refreshed)} {rating}/10",
                detail=f"Average is now {refreshed.average_rating:.1f}",
            ),
            title="Rate",
        )

    def action_clear_rating(self) -> None:
        photo = self._get_current_photo()
        if photo is None:
            self.notify("No photo selected", title="Rating", severity="warning")
            return
        if photo.user_rating is None:
            self.notify("You have not rated this photo", title="Rating")
            return

        def on_confirmed(confirmed: bool | None) -> None:
            if confirmed:
                self._track_task(self._clear_rating(photo))

        self.push_screen(
            ConfirmModal(
                build_clear_rating_confirmation_prompt(_markup_name(photo)),
                action="Remove rating",
            ),
            on_confirmed,
        )

    async def _clear_rating(self, photo: Photo) -> None:
        try:
            refreshed = await self._cache.clear_rating(photo.id)
        except PhotomapError as exc:
            self.notify(build_mutation_error("clear rating", exc), title="Rating", severity="error")
            return
        if refreshed is not None:
            self.notify(f"Rating removed from {_markup_name(refreshed)}", title="Rating")

    def action_delete_photo(self) -> None:
        photo = self._get_current_photo()
        if photo is None:
            self.notify("No photo selected", title="Delete", severity="warning")
            return

        def on_confirmed(confirmed: bool | None) -> None:
            if confirmed:
                self._track_task(self._delete_photo(photo))

        self.push_screen(
            ConfirmModal(build_delete_confirmation_prompt(_markup_name(photo)), action="Delete"),
            on_confirmed,
        )

    async def _delete_photo(self, photo: Photo) -> None:
        try:
            await self._cache.delete(photo.id)
        except PhotomapError as exc:
            self.notify(build_mutation_error("delete photo", exc), title="Delete", severity="error")
            return
        # The viewer works on a frozen snapshot; leave it rather than show a deleted photo.
        current = self._navigator.current_photo()
        if current is not None and current.id == photo.id:
            self._navigator.close()
        self.notify(f"Deleted {_markup_name(photo)}", title="Delete")


__all__ = ["PhotomapBrowser"]
