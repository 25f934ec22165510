"""UI-facing copy builders for action confirmations and notifications."""

from __future__ import annotations

from photomap_client.errors import NotFound, PermissionDenied, PhotomapError, TransportFailure


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_actionable_success(
    message: str,
    *,
    detail: str | None = None,
    next_step: str | None = None,
) -> str:
    """Build a concise success message with optional detail and next step."""
    lines = [_ensure_sentence(message)]
    if detail:
        lines.append(_ensure_sentence(detail))
    if next_step:
        lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_load_error(exc: PhotomapError, admin_contact_email: str) -> str:
    """Message for a failed collection load; permission errors point at the admin."""
    if isinstance(exc, PermissionDenied):
        return build_actionable_error(
            "load photos",
            why="your account is not allowed to view photos",
            next_step=f"contact the administrator at {admin_contact_email}",
        )
    status = exc.status_code if isinstance(exc, TransportFailure) else None
    why = f"the server answered HTTP {status}" if status else "a network or server error occurred"
    return build_actionable_error("load photos", why=why, next_step="press F5 to retry")


def build_mutation_error(action: str, exc: PhotomapError) -> str:
    """Message for a failed rate/clear/delete action."""
    if isinstance(exc, NotFound):
        return build_actionable_error(
            action,
            why="the photo no longer exists",
            next_step="press F5 to refresh the gallery",
        )
    if isinstance(exc, PermissionDenied):
        return build_actionable_error(
            action,
            why="you do not have permission for this photo",
            next_step="ask the photo owner or an administrator",
        )
    return build_actionable_error(action, why=str(exc), next_step="try again")


def build_delete_confirmation_prompt(photo_name: str) -> str:
    """Build confirmation prompt text for deleting one photo."""
    return f"Delete {photo_name}?\nThis cannot be undone."


def build_clear_rating_confirmation_prompt(photo_name: str) -> str:
    """Build confirmation prompt text for clearing the user's rating."""
    return f"Remove your rating from {photo_name}?"


__all__ = [
    "build_actionable_error",
    "build_actionable_success",
    "build_clear_rating_confirmation_prompt",
    "build_delete_confirmation_prompt",
    "build_load_error",
    "build_mutation_error",
    "build_next_step_hint",
]
