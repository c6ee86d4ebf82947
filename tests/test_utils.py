"""Tests for the log file setup."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Iterator

import pytest

from savedsearch.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _restore_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    monkeypatch.setattr(logging_utils, "_LOG_PATH", None)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    log_path = logging_utils.setup_logging(logging.DEBUG, log_dir=tmp_path)

    logging.getLogger("savedsearch.test").info("hello from the test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "savedsearch.log"
    assert "hello from the test" in log_path.read_text(encoding="utf-8")
    kinds = {type(handler) for handler in logging.getLogger().handlers}
    assert logging.handlers.RotatingFileHandler in kinds
    assert logging.StreamHandler in kinds


def test_setup_logging_is_idempotent_without_force(tmp_path: Path) -> None:
    first = logging_utils.setup_logging(log_dir=tmp_path / "a")
    second = logging_utils.setup_logging(log_dir=tmp_path / "b")

    assert first == second
    assert not (tmp_path / "b").exists()


def test_force_reconfigures(tmp_path: Path) -> None:
    logging_utils.setup_logging(log_dir=tmp_path / "a")
    second = logging_utils.setup_logging(log_dir=tmp_path / "b", force=True)

    assert second == tmp_path / "b" / "savedsearch.log"


def test_env_overrides_log_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SAVEDSEARCH_LOG_DIR", str(tmp_path / "env"))

    log_path = logging_utils.setup_logging()

    assert log_path.parent == tmp_path / "env"
