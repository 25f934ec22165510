"""Error taxonomy for collection sync and viewer navigation.

None of these are fatal; every one is recoverable by retrying the user
action that triggered it.
"""

from __future__ import annotations


class PhotomapError(Exception):
    """Base class for recoverable photomap client errors."""


class TransportFailure(PhotomapError):
    """Network, server or payload error during a fetch or mutation."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PermissionDenied(TransportFailure):
    """The server refused the request for the current credentials (HTTP 401/403)."""


class NotFound(PhotomapError):
    """The photo no longer exists server-side (or is no longer visible to the user)."""

    def __init__(self, photo_id: int) -> None:
        super().__init__(f"Photo {photo_id} not found")
        self.photo_id = photo_id


class InvalidTarget(PhotomapError):
    """The viewer was asked to open a photo that is absent from its snapshot."""

    def __init__(self, photo_id: int) -> None:
        super().__init__(f"Photo {photo_id} is not in the viewer snapshot")
        self.photo_id = photo_id


__all__ = [
    "InvalidTarget",
    "NotFound",
    "PermissionDenied",
    "PhotomapError",
    "TransportFailure",
]
