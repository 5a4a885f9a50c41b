"""Application bootstrap helpers for the buffmonster desktop app."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Sequence, TextIO, cast

from .core.colors import build_color_policy
from .core.snapshot import build_snapshot
from .services.config import AppConfig, ConfigLoader, coerce_overrides
from .services.session import DocumentSession
from .services.store import DocumentStore
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class QtRuntime:
    """Container returned by :func:`create_qapp`."""

    app: Any


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the application."""

    level = logging.DEBUG if debug else logging.INFO
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))
    _install_qt_message_handler()


def open_session(config: AppConfig) -> DocumentSession:
    """Build the store described by ``config`` and load its document."""

    policy = build_color_policy(config.color_policy, seed=config.color_seed)
    store = DocumentStore.from_config(config, color_policy=policy)
    session = DocumentSession.open(store)
    _LOGGER.info("Document opened from %s (%s)", store.state_path, session.source)
    return session


def create_qapp() -> QtRuntime:
    """Create (or reuse) the QApplication instance.

    The palette follows the document's ``dark_mode`` flag once the main window
    renders its first snapshot.
    """

    from PySide6.QtWidgets import QApplication

    app = cast(Any, QApplication.instance() or QApplication(sys.argv))
    app.setApplicationName("buffmonster")
    app.setApplicationDisplayName("BuffMonster")
    return QtRuntime(app=app)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the ``buffmonster`` console script."""

    args = _parse_cli_args(argv)
    try:
        cli_overrides = _coerce_cli_overrides(args)
    except ValueError as exc:
        print(f"Invalid override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    loader = ConfigLoader()
    config = loader.load(overrides=cli_overrides or None)
    configure_logging(config.debug_logging)

    if args.dump_config:
        _dump_config(config, loader)
        return 0

    session = open_session(config)
    if args.dump_state:
        _dump_state(session)
        return 0

    from .ui.main_window import MainWindow

    runtime = create_qapp()
    window = MainWindow(session)
    window.show()
    try:
        return int(runtime.app.exec())
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Shutdown requested by user.")
        return 0
    finally:
        session.save()


def _install_qt_message_handler() -> None:
    """Redirect Qt warnings to the Python logging stack."""

    from PySide6.QtCore import QtMsgType, qInstallMessageHandler

    level_map = {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }

    def _handler(mode, context, message):  # type: ignore[no-untyped-def]
        del context
        level = level_map.get(mode, logging.INFO)
        logging.getLogger("PySide6").log(level, message)

    qInstallMessageHandler(_handler)


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="buffmonster",
        description="Tag spans of a plain-text buffer and keep them aligned while editing.",
    )
    parser.add_argument("--state-path", metavar="PATH", help="Structured document location.")
    parser.add_argument("--backup-path", metavar="PATH", help="Raw text backup location.")
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override a configuration field (repeatable).",
    )
    parser.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    parser.add_argument(
        "--dump-state",
        action="store_true",
        help="Load the document, print its render snapshot as JSON and exit.",
    )
    return parser.parse_args(argv)


def _coerce_cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    raw: Dict[str, str] = {}
    for entry in args.overrides or []:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, value = entry.split("=", 1)
        raw[key.strip()] = value
    if args.state_path:
        raw["state_path"] = args.state_path
    if args.backup_path:
        raw["backup_path"] = args.backup_path
    return coerce_overrides(raw)


def _dump_config(config: AppConfig, loader: ConfigLoader, *, stream: TextIO | None = None) -> None:
    destination = stream or sys.stdout
    output = {
        "config": config.to_dict(),
        "meta": {"environment_variables": loader.active_env_overrides()},
    }
    json.dump(output, destination, indent=2)
    destination.write("\n")


def _dump_state(session: DocumentSession, *, stream: TextIO | None = None) -> None:
    destination = stream or sys.stdout
    snapshot = build_snapshot(session.document)
    output = {
        "source": session.source,
        "buffer_length": len(snapshot.buffer),
        "tags": {name: list(color) for name, color in snapshot.colors.items()},
        "tagged_ranges": [tagged.to_dict() for tagged in snapshot.ranges],
        "settings": snapshot.settings.to_dict(),
    }
    json.dump(output, destination, indent=2, ensure_ascii=False)
    destination.write("\n")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
