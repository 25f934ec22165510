"""CLI/bootstrap helpers for the photomap viewer application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from photomap_client.action_messages import build_actionable_error
from photomap_client.config import (
    CONFIG_APP_NAME,
    _coerce_page_size,
    get_config_path,
    load_config,
    save_config,
)
from photomap_client.models import MAX_PAGE_SIZE, UserConfig

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = Path(user_config_dir(CONFIG_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "debug.log"

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _apply_overrides(args: argparse.Namespace, config: UserConfig) -> UserConfig | int:
    """Fold command-line overrides into the loaded config, or return an exit code."""
    if args.base_url is not None:
        base_url = args.base_url.strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            print(
                build_actionable_error(
                    "use the server URL",
                    why=f"{args.base_url!r} is not an http(s) URL",
                    next_step="pass --base-url http://host:port",
                ),
                file=sys.stderr,
            )
            return 1
        config.base_url = base_url
    if args.token is not None:
        config.api_token = args.token.strip()
    if args.page_size is not None:
        if not 1 <= args.page_size <= MAX_PAGE_SIZE:
            print(
                f"Error: --page-size must be between 1 and {MAX_PAGE_SIZE}",
                file=sys.stderr,
            )
            return 1
        config.page_size = _coerce_page_size(args.page_size)
    if args.ascii:
        config.ascii_icons = True
    return config


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    save_config_fn: Callable[[UserConfig], bool] = save_config,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(
        description="Browse, filter and rate a photomap photo collection in a TUI"
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Photomap server URL (default: config value, http://localhost:8080)",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=None,
        help="Bearer token sent with every request (default: config value)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help=f"Photos per page (1-{MAX_PAGE_SIZE}; default: config value)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/photomap-client/debug.log)",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Use ASCII-only status icons for compatibility with limited terminals",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the settings (after the overrides above) to the config file and exit",
    )
    args = parser.parse_args(argv)

    configure_logging_fn(args.debug)
    logger.debug("photomap-viewer starting, cwd=%s", Path.cwd())

    result = _apply_overrides(args, load_config_fn())
    if isinstance(result, int):
        return result
    config = result

    if args.save_config:
        if not save_config_fn(config):
            print(
                build_actionable_error(
                    "save settings",
                    why=f"{get_config_path()} could not be written",
                    next_step="check the directory permissions or run with --debug",
                ),
                file=sys.stderr,
            )
            return 1
        print(f"Saved settings to {get_config_path()}")
        return 0

    if not validate_interactive_tty_fn():
        print(
            "Error: photomap-viewer requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run photomap-viewer directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from photomap_client.app import PhotomapBrowser as _PhotomapBrowser

        app_factory = _PhotomapBrowser

    app = app_factory(config=config, ascii_icons=args.ascii)
    app.run()
    return 0


__all__ = [
    "_apply_overrides",
    "_configure_logging",
    "_validate_interactive_tty",
    "main",
]
