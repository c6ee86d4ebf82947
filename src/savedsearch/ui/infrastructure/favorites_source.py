"""JSON-file fetch collaborator for the entry registry."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..models.search_models import SavedSearchEntry

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.entry_registry import EntryRegistry

LOGGER = logging.getLogger(__name__)


class JsonFavoritesFetcher:
    """Loads saved searches from a JSON file into an :class:`EntryRegistry`.

    The file holds a list of ``{"id", "name", "criteria"}`` objects (``guid``
    is accepted in place of ``id``). Calling the fetcher resets the registry on
    success and reports a failure on any read or parse error; it never raises.

    Example:
        fetcher = JsonFavoritesFetcher(Path("favorites.json"), registry)
        registry.begin_loading()
        fetcher()
    """

    __slots__ = ("_path", "_registry")

    def __init__(self, path: Path | str, registry: EntryRegistry) -> None:
        self._path = Path(path).expanduser()
        self._registry = registry

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self) -> None:
        try:
            entries = self._read_entries()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Unable to load saved searches from %s: %s", self._path, exc)
            self._registry.fail(str(exc))
            return
        LOGGER.debug("Loaded %d saved searches from %s", len(entries), self._path)
        self._registry.reset(entries)

    def _read_entries(self) -> list[SavedSearchEntry]:
        if not self._path.exists():
            return []
        payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("entries", [])
        if not isinstance(payload, list):
            raise ValueError("Saved search file must contain a list of entries")
        entries: list[SavedSearchEntry] = []
        for item in payload:
            if not isinstance(item, dict):
                LOGGER.debug("Skipping non-object saved search entry: %r", item)
                continue
            entries.append(SavedSearchEntry.from_mapping(item))
        return entries


__all__ = ["JsonFavoritesFetcher"]
