"""Tests for the command-line entry point."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from photomap_client.cli import _configure_logging, main
from photomap_client.models import UserConfig


class FakeApp:
    instances: list[FakeApp] = []

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.ran = False
        FakeApp.instances.append(self)

    def run(self) -> None:
        self.ran = True


@pytest.fixture
def run_main():
    FakeApp.instances.clear()

    def _run(argv: list[str], *, config: UserConfig | None = None, tty: bool = True) -> int:
        return main(
            argv,
            load_config_fn=lambda: config or UserConfig(),
            configure_logging_fn=lambda debug: None,
            validate_interactive_tty_fn=lambda: tty,
            app_factory=FakeApp,
        )

    return _run


def test_main_runs_app_with_loaded_config(run_main) -> None:
    assert run_main([]) == 0

    app = FakeApp.instances[0]
    assert app.ran
    assert app.kwargs["config"] == UserConfig()
    assert app.kwargs["ascii_icons"] is False


def test_main_applies_overrides(run_main) -> None:
    result = run_main(
        ["--base-url", "https://photos.example.org/", "--token", " abc ", "--page-size", "40"]
    )

    assert result == 0
    config = FakeApp.instances[0].kwargs["config"]
    assert config.base_url == "https://photos.example.org"
    assert config.api_token == "abc"
    assert config.page_size == 40


def test_main_ascii_flag(run_main) -> None:
    assert run_main(["--ascii"]) == 0

    app = FakeApp.instances[0]
    assert app.kwargs["ascii_icons"] is True
    assert app.kwargs["config"].ascii_icons is True


def test_main_rejects_non_http_base_url(run_main, capsys) -> None:
    assert run_main(["--base-url", "ftp://nope"]) == 1

    assert "not an http(s) URL" in capsys.readouterr().err
    assert not FakeApp.instances


@pytest.mark.parametrize("size", ["0", "101"])
def test_main_rejects_out_of_range_page_size(run_main, capsys, size) -> None:
    assert run_main(["--page-size", size]) == 1

    assert "--page-size" in capsys.readouterr().err


def test_non_tty_returns_actionable_error(run_main, capsys) -> None:
    assert run_main([], tty=False) == 2

    err = capsys.readouterr().err
    assert "requires an interactive TTY" in err
    assert "--help" in err
    assert not FakeApp.instances


def test_save_config_writes_overrides_without_launching(tmp_path, monkeypatch, capsys) -> None:
    FakeApp.instances.clear()
    monkeypatch.setattr("photomap_client.config.user_config_dir", lambda name: str(tmp_path))
    saved: list[UserConfig] = []

    def _save(config: UserConfig) -> bool:
        saved.append(config)
        return True

    result = main(
        ["--save-config", "--base-url", "https://photos.example.org", "--page-size", "50"],
        load_config_fn=UserConfig,
        configure_logging_fn=lambda debug: None,
        validate_interactive_tty_fn=lambda: False,
        save_config_fn=_save,
        app_factory=FakeApp,
    )

    assert result == 0
    assert saved[0].base_url == "https://photos.example.org"
    assert saved[0].page_size == 50
    assert str(tmp_path / "config.json") in capsys.readouterr().out
    assert not FakeApp.instances


def test_save_config_reports_write_failure(capsys) -> None:
    FakeApp.instances.clear()

    result = main(
        ["--save-config"],
        load_config_fn=UserConfig,
        configure_logging_fn=lambda debug: None,
        validate_interactive_tty_fn=lambda: True,
        save_config_fn=lambda config: False,
        app_factory=FakeApp,
    )

    assert result == 1
    assert "Could not save settings." in capsys.readouterr().err
    assert not FakeApp.instances


def test_configure_logging_debug_writes_to_config_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("photomap_client.cli.user_config_dir", lambda name: str(tmp_path / name))
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level

    try:
        _configure_logging(True)
        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert (tmp_path / "photomap-client" / "debug.log").exists()
    finally:
        for handler in root.handlers:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)


def test_configure_logging_disabled_by_default() -> None:
    try:
        _configure_logging(False)
        assert logging.getLogger("photomap_client").isEnabledFor(logging.CRITICAL) is False
    finally:
        logging.disable(logging.NOTSET)
