"""Settings dataclasses and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

__all__ = [
    "Settings",
    "SettingsStore",
    "SEARCH_MODE_CHOICES",
    "SAVE_ENABLE_MODE_CHOICES",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".savedsearch"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_ENV_OVERRIDES: Mapping[str, str] = {
    "SAVEDSEARCH_SEARCH_MODE": "search_mode",
    "SAVEDSEARCH_SAVE_ENABLE_MODE": "save_enable_mode",
    "SAVEDSEARCH_FAVORITES_PATH": "favorites_path",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SAVEDSEARCH_DEBUG_LOGGING": "debug_logging",
    "SAVEDSEARCH_CONFIRM_HTML": "confirm_html",
    "SAVEDSEARCH_CONFIRM_MODAL": "confirm_modal",
}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
DEFAULT_SEARCH_MODE = "basic"
DEFAULT_SAVE_ENABLE_MODE = "latch"
SEARCH_MODE_CHOICES: tuple[str, ...] = ("basic", "advanced")
SAVE_ENABLE_MODE_CHOICES: tuple[str, ...] = ("latch", "derived")


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between sessions."""

    search_mode: str = DEFAULT_SEARCH_MODE
    save_enable_mode: str = DEFAULT_SAVE_ENABLE_MODE
    favorites_path: str | None = None
    confirm_html: bool = True
    confirm_modal: bool = True
    debug_logging: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, applying CLI/environment overrides when present."""

        payload = self._read_payload()
        settings = Settings()

        if payload:
            data = _filter_fields(payload)
            try:
                settings = Settings(**data)
            except TypeError as exc:
                LOGGER.warning("Settings payload contained unexpected data: %s", exc)
                settings = Settings()

        version_mismatch = bool(payload) and payload.get("version") != _SETTINGS_VERSION
        settings, normalized = _normalize_choices(settings)
        if normalized or version_mismatch:
            try:
                self.save(settings)
            except OSError as exc:  # pragma: no cover - depends on filesystem
                LOGGER.warning("Failed to migrate settings payload: %s", exc)

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")

        settings = self._apply_env_overrides(settings)
        settings, _ = _normalize_choices(settings)
        return settings

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk with atomic file writes."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed or value is None:
                continue
            filtered[key] = value
        metadata_override = filtered.get("metadata")
        if isinstance(metadata_override, Mapping):
            merged_metadata = dict(settings.metadata or {})
            merged_metadata.update(metadata_override)
            filtered["metadata"] = merged_metadata
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _normalize_choices(settings: Settings) -> tuple[Settings, bool]:
    """Coerce mode strings into their canonical values, warning on unknown input."""

    updates: Dict[str, Any] = {}
    mode = str(settings.search_mode or "").strip().lower()
    if mode not in SEARCH_MODE_CHOICES:
        LOGGER.warning("Unknown search_mode %r; falling back to basic", settings.search_mode)
        mode = DEFAULT_SEARCH_MODE
    if mode != settings.search_mode:
        updates["search_mode"] = mode

    enable_mode = str(settings.save_enable_mode or "").strip().lower()
    if enable_mode not in SAVE_ENABLE_MODE_CHOICES:
        LOGGER.warning(
            "Unknown save_enable_mode %r; falling back to latch", settings.save_enable_mode
        )
        enable_mode = DEFAULT_SAVE_ENABLE_MODE
    if enable_mode != settings.save_enable_mode:
        updates["save_enable_mode"] = enable_mode

    if not updates:
        return settings, False
    return replace(settings, **updates), True
