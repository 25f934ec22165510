"""Internal service layer: REST calls, port interfaces and auxiliary fetches."""

from photomap_client.services.photo_api_service import (
    clear_rating,
    delete_photo,
    fetch_collection,
    fetch_photo,
    fetch_public_settings,
    rate_photo,
)
from photomap_client.services.settings_service import gather_isolated, load_public_settings

__all__ = [
    "clear_rating",
    "delete_photo",
    "fetch_collection",
    "fetch_photo",
    "fetch_public_settings",
    "gather_isolated",
    "load_public_settings",
    "rate_photo",
]
