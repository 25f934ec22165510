"""Modal dialogs and screens for the photomap TUI.

Import from this package: ``from photomap_client.modals import ConfirmModal``
"""

# common.py: confirmation and rating dialogs
from photomap_client.modals.common import ConfirmModal, RatingModal

# filters.py: date, rating and GPS filter form
from photomap_client.modals.filters import FilterModal

# viewer.py: fullscreen photo viewer
from photomap_client.modals.viewer import PhotoViewerScreen

__all__ = [
    "ConfirmModal",
    "FilterModal",
    "PhotoViewerScreen",
    "RatingModal",
]
