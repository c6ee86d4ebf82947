"""Application bootstrap helpers for the saved-search desktop demo."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, TextIO, cast

from .services.settings import (
    SAVE_ENABLE_MODE_CHOICES,
    SEARCH_MODE_CHOICES,
    Settings,
    SettingsStore,
)
from .ui.bootstrap import SavedSearchView, create_saved_search_view
from .ui.domain.entry_registry import EntryRegistry
from .ui.events import EventBus
from .ui.infrastructure import JsonFavoritesFetcher, RegistryCommitExecutor
from .ui.models.search_models import SearchCriteria, SearchMode
from .ui.presentation.dialogs import QtNotifier
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_SWITCHES: Dict[str, bool] = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the application."""

    level = logging.DEBUG if debug else logging.INFO
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))
    _install_qt_message_handler()


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        settings = active_store.load(overrides=overrides)
    except Exception as exc:  # pragma: no cover - defensive path
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        settings = Settings()
    return settings


def create_qapp(qt_args: Sequence[str] = ()) -> Any:
    """Create (or reuse) the QApplication; ``qt_args`` are options argparse left unparsed."""

    try:  # Local import to avoid mandatory PySide6 dependency at import time.
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError(
            "PySide6 must be installed to launch the saved-search UI."
        ) from exc

    app = cast(Any, QApplication.instance() or QApplication([sys.argv[0] if sys.argv else "savedsearch", *qt_args]))
    app.setApplicationName("Saved Searches")
    app.setApplicationDisplayName("Saved Searches")
    return app


class SearchWindow:
    """Minimal search form hosting the saved-search panel."""

    def __init__(self, settings: Settings, favorites_path: Path | None) -> None:
        from PySide6.QtWidgets import QFormLayout, QInputDialog, QLineEdit, QVBoxLayout, QWidget

        self._window = QWidget()
        self._window.setWindowTitle("Saved Searches")
        layout = QVBoxLayout(self._window)
        form = QFormLayout()
        self._type_edit = QLineEdit()
        self._tag_edit = QLineEdit()
        self._query_edit = QLineEdit()
        form.addRow("Type", self._type_edit)
        form.addRow("Tag", self._tag_edit)
        form.addRow("Query", self._query_edit)
        layout.addLayout(form)

        def _prompt_name(criteria: SearchCriteria) -> str | None:
            text, ok = QInputDialog.getText(self._window, "Save As", "Name")
            return text if ok else None

        registry = EntryRegistry(EventBus())
        if favorites_path is not None:
            fetch: Callable[[], None] = JsonFavoritesFetcher(favorites_path, registry)
        else:
            fetch = lambda: registry.reset(())  # noqa: E731

        self.view: SavedSearchView = create_saved_search_view(
            accessor=self.current_value,
            notifier=QtNotifier(parent_provider=lambda: self._window),
            commit_executor=RegistryCommitExecutor(_prompt_name),
            fetch_collection=fetch,
            registry=registry,
            settings=settings,
            apply_value=self.apply_value,
            with_panel=True,
            parent=self._window,
        )
        panel = self.view.panel
        if panel is not None and panel.widget is not None:
            layout.addWidget(panel.widget)

    def current_value(self) -> dict[str, str]:
        return {
            "type": self._type_edit.text().strip(),
            "tag": self._tag_edit.text().strip(),
            "query": self._query_edit.text().strip(),
        }

    def apply_value(self, criteria: Any) -> None:
        resolved = SearchCriteria.coerce(criteria)
        self._type_edit.setText(resolved.type or "")
        self._tag_edit.setText(resolved.tag or "")
        self._query_edit.setText(resolved.query or "")

    def show(self) -> None:
        self._window.show()


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point invoked by the `savedsearch` console script."""

    args, qt_args = _parse_cli_args(argv)

    debug = _SWITCHES.get(os.environ.get("SAVEDSEARCH_DEBUG", "").strip().lower(), False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("SAVEDSEARCH_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if args.advanced:
        cli_overrides["search_mode"] = SearchMode.ADVANCED.value
    if args.favorites:
        cli_overrides["favorites_path"] = args.favorites

    overrides_mapping: Dict[str, Any] | None = cli_overrides or None
    settings = load_settings(resolved_path, store=settings_store, overrides=overrides_mapping)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    app = create_qapp(qt_args)
    favorites = Path(settings.favorites_path).expanduser() if settings.favorites_path else None
    window = SearchWindow(settings, favorites)
    window.show()

    try:
        app.exec()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Shutdown requested by user.")
    finally:
        window.view.dispose()


def _install_qt_message_handler() -> None:
    """Redirect Qt warnings to the Python logging stack when available."""

    try:
        from PySide6.QtCore import QtMsgType, qInstallMessageHandler
    except Exception:  # pragma: no cover - PySide6 optional during tests
        return

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


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="savedsearch",
        add_help=True,
        description="Launch the saved-search panel or inspect its configuration.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.savedsearch/settings.json path.",
    )
    parser.add_argument(
        "--favorites",
        metavar="PATH",
        help="JSON file listing saved searches to load into the panel.",
    )
    parser.add_argument(
        "--advanced",
        action="store_true",
        help="Save searches in advanced mode instead of basic.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="FIELD=VALUE",
        action="append",
        default=[],
        help=f"Override one setting before launch (repeatable): {', '.join(_OVERRIDE_PARSERS)}.",
    )
    return parser.parse_known_args(argv)


def _parse_switch(raw: str) -> bool:
    try:
        return _SWITCHES[raw.lower()]
    except KeyError:
        raise ValueError(f"expected on/off, got '{raw}'") from None


def _parse_choice(choices: Sequence[str]) -> Callable[[str], str]:
    def parse(raw: str) -> str:
        value = raw.lower()
        if value not in choices:
            raise ValueError(f"expected one of {', '.join(choices)}, got '{raw}'")
        return value

    return parse


def _parse_favorites_path(raw: str) -> str | None:
    return None if raw.lower() in {"", "none"} else raw


def _parse_metadata(raw: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError("metadata must be a JSON object") from exc
    if not isinstance(payload, dict):
        raise ValueError("metadata must be a JSON object")
    return payload


_OVERRIDE_PARSERS: Dict[str, Callable[[str], Any]] = {
    "search_mode": _parse_choice(SEARCH_MODE_CHOICES),
    "save_enable_mode": _parse_choice(SAVE_ENABLE_MODE_CHOICES),
    "favorites_path": _parse_favorites_path,
    "confirm_html": _parse_switch,
    "confirm_modal": _parse_switch,
    "debug_logging": _parse_switch,
    "metadata": _parse_metadata,
}


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for entry in items:
        field_name, sep, raw_value = entry.partition("=")
        field_name = field_name.strip()
        if not sep or not field_name:
            raise ValueError(f"'{entry}' is not FIELD=VALUE")
        parser = _OVERRIDE_PARSERS.get(field_name)
        if parser is None:
            raise ValueError(f"unknown setting '{field_name}'")
        try:
            overrides[field_name] = parser(raw_value.strip())
        except ValueError as exc:
            raise ValueError(f"{field_name}: {exc}") from exc
    return overrides


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    output = {
        "settings": asdict(settings),
        "path": str(store.path),
        "overrides": sorted(overrides),
    }
    json.dump(output, destination, indent=2)
    destination.write("\n")


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
