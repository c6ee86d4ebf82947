"""Log file setup for the saved-search application."""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["setup_logging"]

LOG_FILE_NAME = "savedsearch.log"
_LOG_PATH: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    force: bool = False,
) -> Path:
    """Send root logging to ``savedsearch.log`` (rotated) and to the console.

    The directory is ``log_dir``, else ``$SAVEDSEARCH_LOG_DIR``, else
    ``~/.savedsearch/logs``. Repeated calls return the first log path unless
    ``force`` is given.
    """
    global _LOG_PATH
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    directory = Path(
        log_dir or os.environ.get("SAVEDSEARCH_LOG_DIR") or Path.home() / ".savedsearch" / "logs"
    ).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / LOG_FILE_NAME

    formatter = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=512_000, backupCount=2, encoding="utf-8"
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[file_handler, console_handler], force=True)

    _LOG_PATH = log_path
    return log_path
