"""Filter state manager: merges partial filter edits and publishes the result.

Merge contract for ``apply(partial)``, per field:

    key omitted           -> keep the current value
    value is None         -> remove the constraint
    value is "" (text)    -> remove the constraint
    concrete value        -> set it (0 and False are concrete)

``page`` is reset to 0 by every ``apply``; ``clear`` replaces the whole state
with the defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import fields, replace
from datetime import date, datetime
from typing import Any

from photomap_client.models import (
    CONSTRAINT_FIELDS,
    DEFAULT_FILTERS,
    FILTER_WIRE_NAMES,
    MAX_PAGE_SIZE,
    MAX_RATING,
    MIN_RATING,
    FilterCriteria,
)
from photomap_client.notifier import LastValueNotifier, Unsubscribe

logger = logging.getLogger(__name__)

_WIRE_TO_FIELD = {wire: name for name, wire in FILTER_WIRE_NAMES.items()}
_FIELD_NAMES = frozenset(f.name for f in fields(FilterCriteria))


def _resolve_key(key: str) -> str:
    """Map a snake_case or wire (camelCase) key to a FilterCriteria field name."""
    if key in _FIELD_NAMES:
        return key
    name = _WIRE_TO_FIELD.get(key)
    if name is None:
        raise ValueError(f"Unknown filter field: {key!r}")
    return name


def _coerce_date(name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValueError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from exc
    raise ValueError(f"{name} must be a date, got {type(value).__name__}")


def _coerce_min_rating(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"min_rating must be an integer, got {value!r}")
    # 0 is the "All" choice in rating pickers: no threshold.
    if value == 0:
        return None
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValueError(f"min_rating must be between {MIN_RATING} and {MAX_RATING}, got {value}")
    return value


def _coerce_has_gps(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"has_gps must be a boolean, got {value!r}")


def _coerce_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_PAGE_SIZE:
        raise ValueError(f"size must be an integer between 1 and {MAX_PAGE_SIZE}, got {value!r}")
    return value


def _coerce_value(name: str, value: Any, defaults: FilterCriteria) -> Any:
    """Normalize one concrete value; ``None`` means the field falls back to unset/default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        # Constraints disappear; shape fields go back to their defaults.
        return getattr(defaults, name) if name not in CONSTRAINT_FIELDS else None
    if name in ("date_from", "date_to"):
        return _coerce_date(name, value)
    if name == "min_rating":
        return _coerce_min_rating(value)
    if name == "has_gps":
        return _coerce_has_gps(value)
    if name == "size":
        return _coerce_size(value)
    if name == "sort":
        return str(value).strip()
    return value


def merge_criteria(
    current: FilterCriteria,
    partial: Mapping[str, Any],
    *,
    defaults: FilterCriteria = DEFAULT_FILTERS,
) -> FilterCriteria:
    """Merge ``partial`` into ``current`` using explicit-unset semantics.

    Pure function; raises ``ValueError`` for unknown keys or invalid values.
    The returned criteria always has ``page == 0``.
    """
    changes: dict[str, Any] = {}
    for key, value in partial.items():
        name = _resolve_key(key)
        if name == "page":
            continue
        changes[name] = _coerce_value(name, value, defaults)
    changes["page"] = 0
    return replace(current, **changes)


def has_inverted_date_range(criteria: FilterCriteria) -> bool:
    """True when both dates are set and ``date_from`` is after ``date_to``.

    Such criteria are still valid; they simply match no dated photo.
    """
    return (
        criteria.date_from is not None
        and criteria.date_to is not None
        and criteria.date_from > criteria.date_to
    )


class FilterStateManager:
    """Holds the active filter criteria and publishes every change.

    Subscribers get the current criteria immediately on subscription and
    then one notification per ``apply``/``clear``/``set_page`` call, in call
    order.
    """

    def __init__(self, defaults: FilterCriteria = DEFAULT_FILTERS) -> None:
        self._defaults = defaults
        self._notifier: LastValueNotifier[FilterCriteria] = LastValueNotifier(defaults)

    @property
    def defaults(self) -> FilterCriteria:
        return self._defaults

    def current(self) -> FilterCriteria:
        """Return the latest published criteria."""
        return self._notifier.value

    def subscribe(self, listener: Callable[[FilterCriteria], None]) -> Unsubscribe:
        """Subscribe to criteria changes; the current value is replayed at once."""
        return self._notifier.subscribe(listener)

    def apply(self, partial: Mapping[str, Any]) -> FilterCriteria:
        """Merge a partial edit into the current criteria and publish it."""
        merged = merge_criteria(self.current(), partial, defaults=self._defaults)
        logger.debug("Filters applied: %s -> %s", dict(partial), merged.as_dict())
        self._notifier.publish(merged)
        return merged

    def clear(self) -> FilterCriteria:
        """Reset to the defaults, discarding every override."""
        logger.debug("Filters cleared")
        self._notifier.publish(self._defaults)
        return self._defaults

    def set_page(self, page: int) -> FilterCriteria:
        """Move to another result page without touching any constraint."""
        if isinstance(page, bool) or not isinstance(page, int) or page < 0:
            raise ValueError(f"page must be a non-negative integer, got {page!r}")
        updated = self.current().with_page(page)
        self._notifier.publish(updated)
        return updated

    def active_filter_count(self) -> int:
        """Number of narrowing constraints currently set."""
        criteria = self.current()
        return sum(1 for name in CONSTRAINT_FIELDS if getattr(criteria, name) is not None)

    def has_active_filters(self) -> bool:
        return self.active_filter_count() > 0


__all__ = ["FilterStateManager", "has_inverted_date_range", "merge_criteria"]
