"""Tests for config persistence and load hardening."""

from __future__ import annotations

import json

import pytest

from photomap_client.config import (
    _config_to_dict,
    _dict_to_config,
    get_config_path,
    load_config,
    save_config,
)
from photomap_client.models import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SWIPE_THRESHOLD_PX,
    DEFAULT_TAP_THRESHOLD_PX,
    MAX_PAGE_SIZE,
    FilterCriteria,
    UserConfig,
)


def test_get_config_path_ends_with_app_dir() -> None:
    path = get_config_path()

    assert path.name == "config.json"
    assert path.parent.name == "photomap-client"


def test_missing_file_returns_defaults(tmp_path) -> None:
    assert load_config(tmp_path / "missing.json") == UserConfig()


@pytest.mark.parametrize("payload", [[], "oops", 123])
def test_load_config_non_dict_root_returns_default(payload, tmp_path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(payload), encoding="utf-8")

    assert load_config(config_file) == UserConfig()


def test_load_config_invalid_json_returns_default(tmp_path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json", encoding="utf-8")

    assert load_config(config_file) == UserConfig()


def test_save_then_load_round_trip(tmp_path, sample_config) -> None:
    config_file = tmp_path / "nested" / "config.json"
    config = sample_config(
        base_url="https://photos.example.org",
        api_token="abc",
        page_size=50,
        clear_on_load_failure="always",
        ascii_icons=True,
    )

    assert save_config(config, config_file) is True
    assert load_config(config_file) == config
    assert not list(config_file.parent.glob(".config-*.tmp"))


def test_save_config_reports_os_errors(tmp_path, sample_config) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    assert save_config(sample_config(), blocker / "config.json") is False


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(0, 1), (500, MAX_PAGE_SIZE), ("20", DEFAULT_PAGE_SIZE), (True, DEFAULT_PAGE_SIZE), (35, 35)],
)
def test_page_size_is_validated(raw, expected) -> None:
    assert _dict_to_config({"page_size": raw}).page_size == expected


def test_thresholds_fall_back_when_tap_not_below_swipe() -> None:
    config = _dict_to_config({"tap_threshold_px": 60, "swipe_threshold_px": 40})

    assert config.tap_threshold_px == DEFAULT_TAP_THRESHOLD_PX
    assert config.swipe_threshold_px == DEFAULT_SWIPE_THRESHOLD_PX


def test_valid_custom_thresholds_are_kept() -> None:
    config = _dict_to_config({"tap_threshold_px": 4, "swipe_threshold_px": 80})

    assert (config.tap_threshold_px, config.swipe_threshold_px) == (4, 80)


def test_invalid_scalars_fall_back_to_defaults() -> None:
    config = _dict_to_config(
        {
            "base_url": "   ",
            "api_token": 42,
            "clear_on_load_failure": "sometimes",
            "request_timeout_seconds": -3,
            "ascii_icons": "yes",
        }
    )

    assert config.base_url == DEFAULT_BASE_URL
    assert config.api_token == ""
    assert config.clear_on_load_failure == "permission"
    assert config.request_timeout_seconds == UserConfig().request_timeout_seconds
    assert config.ascii_icons is False


def test_config_to_dict_is_json_serializable(sample_config) -> None:
    data = _config_to_dict(sample_config(page_size=7))

    assert json.loads(json.dumps(data))["page_size"] == 7


def test_default_filters_follow_config(sample_config) -> None:
    config = sample_config(page_size=40, default_sort="takenAt,asc")

    assert config.default_filters() == FilterCriteria(size=40, sort="takenAt,asc")


def test_failed_save_leaves_no_temp_file(tmp_path, monkeypatch) -> None:
    config_file = tmp_path / "config.json"

    def _fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("photomap_client.config.os.replace", _fail)

    assert save_config(UserConfig(), config_file) is False
    assert list(tmp_path.iterdir()) == []
