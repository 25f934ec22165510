"""Terminal client for browsing, filtering and rating a photomap photo collection.

Public API re-exports for library use; the TUI lives in ``photomap_client.app``.
"""

from photomap_client.collection import CollectionCache, LoadFailurePolicy, LoadOutcome
from photomap_client.errors import (
    InvalidTarget,
    NotFound,
    PermissionDenied,
    PhotomapError,
    TransportFailure,
)
from photomap_client.filters import FilterStateManager, merge_criteria
from photomap_client.gestures import GestureAction, interpret_gesture
from photomap_client.models import (
    DEFAULT_FILTERS,
    FilterCriteria,
    PageInfo,
    Photo,
    PhotoPage,
    PublicSettings,
    RatingPatch,
    RatingResult,
    UserConfig,
)
from photomap_client.notifier import LastValueNotifier
from photomap_client.query import filter_photos, gps_bounds, matches_criteria
from photomap_client.viewer import ViewerHooks, ViewerNavigator, ViewerState

__version__ = "0.3.0"

__all__ = [
    "DEFAULT_FILTERS",
    "CollectionCache",
    "FilterCriteria",
    "FilterStateManager",
    "GestureAction",
    "InvalidTarget",
    "LastValueNotifier",
    "LoadFailurePolicy",
    "LoadOutcome",
    "NotFound",
    "PageInfo",
    "PermissionDenied",
    "Photo",
    "PhotoPage",
    "PhotomapError",
    "PublicSettings",
    "RatingPatch",
    "RatingResult",
    "TransportFailure",
    "UserConfig",
    "ViewerHooks",
    "ViewerNavigator",
    "ViewerState",
    "filter_photos",
    "gps_bounds",
    "interpret_gesture",
    "matches_criteria",
    "merge_criteria",
]
