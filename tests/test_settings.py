"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from savedsearch.services.settings import Settings, SettingsStore


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SAVEDSEARCH_SEARCH_MODE",
        "SAVEDSEARCH_SAVE_ENABLE_MODE",
        "SAVEDSEARCH_FAVORITES_PATH",
        "SAVEDSEARCH_DEBUG_LOGGING",
        "SAVEDSEARCH_CONFIRM_HTML",
        "SAVEDSEARCH_CONFIRM_MODAL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    assert store.load() == Settings()
    assert not (tmp_path / "settings.json").exists()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    original = Settings(
        search_mode="advanced",
        save_enable_mode="derived",
        favorites_path="~/favorites.json",
        confirm_html=False,
        confirm_modal=False,
        debug_logging=True,
        metadata={"team": "qa"},
    )

    SettingsStore(path).save(original)

    assert SettingsStore(path).load() == original
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1


def test_unknown_keys_are_dropped(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"version": 1, "search_mode": "advanced", "legacy": 1}), encoding="utf-8")

    settings = SettingsStore(path).load()

    assert settings.search_mode == "advanced"


def test_invalid_choice_is_normalized_and_migrated(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"version": 1, "search_mode": "Expert", "save_enable_mode": "DERIVED"}),
        encoding="utf-8",
    )

    with caplog.at_level("WARNING"):
        settings = SettingsStore(path).load()

    assert settings.search_mode == "basic"
    assert settings.save_enable_mode == "derived"
    assert "Unknown search_mode" in caplog.text
    persisted = json.loads(path.read_text(encoding="utf-8"))
    assert persisted["search_mode"] == "basic"


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2", encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_non_object_payload_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[]", encoding="utf-8")

    assert SettingsStore(path).load() == Settings()


def test_cli_overrides_apply_without_persisting(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings())

    settings = SettingsStore(path).load(overrides={"search_mode": "advanced", "favorites_path": None})

    assert settings.search_mode == "advanced"
    assert settings.favorites_path is None
    assert json.loads(path.read_text(encoding="utf-8"))["search_mode"] == "basic"


def test_metadata_overrides_merge(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(metadata={"a": 1}))

    settings = SettingsStore(path).load(overrides={"metadata": {"b": 2}})

    assert settings.metadata == {"a": 1, "b": 2}


def test_env_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    SettingsStore(path).save(Settings(search_mode="basic", confirm_modal=True))
    monkeypatch.setenv("SAVEDSEARCH_SEARCH_MODE", "advanced")
    monkeypatch.setenv("SAVEDSEARCH_CONFIRM_MODAL", "off")
    monkeypatch.setenv("SAVEDSEARCH_DEBUG_LOGGING", "yes")

    settings = SettingsStore(path).load(overrides={"search_mode": "basic"})

    assert settings.search_mode == "advanced"
    assert settings.confirm_modal is False
    assert settings.debug_logging is True


def test_invalid_env_choice_falls_back(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SAVEDSEARCH_SAVE_ENABLE_MODE", "sometimes")

    settings = SettingsStore(tmp_path / "settings.json").load()

    assert settings.save_enable_mode == "latch"
