"""Configuration persistence: load, save and validation."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from photomap_client.models import (
    CONFIG_APP_NAME,
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SORT,
    DEFAULT_SWIPE_THRESHOLD_PX,
    DEFAULT_TAP_THRESHOLD_PX,
    LOAD_FAILURE_MODES,
    MAX_PAGE_SIZE,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field                    Rule                              Handler
#   ───────────────────────  ────────────────────────────────  ─────────────────
#   page_size                1 ≤ x ≤ MAX_PAGE_SIZE             _coerce_page_size
#   request_timeout_seconds  x ≥ 1                             _coerce_positive_int
#   tap/swipe thresholds     1 ≤ tap < swipe                   _coerce_thresholds
#   clear_on_load_failure    in LOAD_FAILURE_MODES             _dict_to_config
#   base_url                 non-empty string                  _dict_to_config
#   scalar fields            type-checked via _safe_get()      _dict_to_config
#
CONFIG_FILENAME = "config.json"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/photomap-client/config.json
    - macOS: ~/Library/Application Support/photomap-client/config.json
    - Windows: %APPDATA%/photomap-client/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "base_url": config.base_url,
        "api_token": config.api_token,
        "page_size": _coerce_page_size(config.page_size),
        "default_sort": config.default_sort,
        "request_timeout_seconds": config.request_timeout_seconds,
        "tap_threshold_px": config.tap_threshold_px,
        "swipe_threshold_px": config.swipe_threshold_px,
        "clear_on_load_failure": config.clear_on_load_failure,
        "ascii_icons": config.ascii_icons,
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type) or (
        expected_type is int and isinstance(value, bool)
    ):
        return default
    return value


def _coerce_page_size(value: Any) -> int:
    """Validate and clamp the configured page size."""
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_PAGE_SIZE
    return max(1, min(value, MAX_PAGE_SIZE))


def _coerce_positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


def _coerce_thresholds(tap: Any, swipe: Any) -> tuple[int, int]:
    """Keep the tap threshold strictly below the swipe threshold."""
    tap_px = _coerce_positive_int(tap, DEFAULT_TAP_THRESHOLD_PX)
    swipe_px = _coerce_positive_int(swipe, DEFAULT_SWIPE_THRESHOLD_PX)
    if tap_px >= swipe_px:
        return DEFAULT_TAP_THRESHOLD_PX, DEFAULT_SWIPE_THRESHOLD_PX
    return tap_px, swipe_px


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    base_url = _safe_get(data, "base_url", DEFAULT_BASE_URL, str).strip() or DEFAULT_BASE_URL
    sort = _safe_get(data, "default_sort", DEFAULT_SORT, str).strip() or DEFAULT_SORT
    failure_mode = _safe_get(data, "clear_on_load_failure", "permission", str)
    if failure_mode not in LOAD_FAILURE_MODES:
        failure_mode = "permission"
    tap_px, swipe_px = _coerce_thresholds(
        data.get("tap_threshold_px"), data.get("swipe_threshold_px")
    )

    return UserConfig(
        base_url=base_url,
        api_token=_safe_get(data, "api_token", "", str),
        page_size=_coerce_page_size(data.get("page_size", DEFAULT_PAGE_SIZE)),
        default_sort=sort,
        request_timeout_seconds=_coerce_positive_int(
            data.get("request_timeout_seconds"), DEFAULT_REQUEST_TIMEOUT_SECONDS
        ),
        tap_threshold_px=tap_px,
        swipe_threshold_px=swipe_px,
        clear_on_load_failure=failure_mode,
        ascii_icons=_safe_get(data, "ascii_icons", False, bool),
        version=_safe_get(data, "version", 1, int),
    )


def load_config(config_path: Path | None = None) -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            logger.warning("Config file is not a JSON object, using defaults")
            return UserConfig()
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return UserConfig()
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()


def save_config(config: UserConfig, config_path: Path | None = None) -> bool:
    """Write ``config`` as JSON, replacing the previous file in one step.

    The JSON goes to a sibling temp file first and is moved over the
    config with ``os.replace``, so an interrupted write never leaves a
    truncated file. Returns False (and logs) on filesystem errors.
    """
    config_path = config_path or get_config_path()
    payload = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False) + "\n"
    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=config_path.parent,
            prefix=".config-",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(payload)
        os.replace(tmp_path, config_path)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", config_path, e)
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        return False
    logger.info("Saved config to %s", config_path)
    return True


__all__ = [
    "CONFIG_APP_NAME",
    "get_config_path",
    "load_config",
    "save_config",
]
