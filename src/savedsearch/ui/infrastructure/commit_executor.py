"""In-memory commit executor applying save requests to the registry."""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from ..models.search_models import CommitRequest, SavedSearchEntry, SearchCriteria

LOGGER = logging.getLogger(__name__)

NamePrompt = Callable[[SearchCriteria], "str | None"]


class RegistryCommitExecutor:
    """Implements the ``CommitExecutor`` protocol against the registry itself.

    Overwrite requests replace the target entry's criteria with the current
    ones. Create requests ask ``name_prompt`` for a display name (returning
    None or an empty string cancels) and append a new entry with a fresh id.
    """

    __slots__ = ("_name_prompt", "_id_factory")

    def __init__(
        self,
        name_prompt: NamePrompt,
        *,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._name_prompt = name_prompt
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def launch(self, request: CommitRequest) -> SavedSearchEntry | None:
        criteria = SearchCriteria.coerce(request.accessor())
        registry = request.registry

        if request.pending_payload is not None:
            guid = request.pending_payload.guid
            updated = registry.update(guid, criteria=criteria)
            LOGGER.info("Overwrote saved search %s (%s)", updated.name, guid)
            return updated

        name = (self._name_prompt(criteria) or "").strip()
        if not name:
            LOGGER.debug("Save as cancelled: no name given")
            return None
        entry = SavedSearchEntry(id=self._id_factory(), name=name, criteria=criteria)
        registry.add(entry)
        LOGGER.info("Saved new search %s (%s, mode=%s)", name, entry.id, request.mode.value)
        return entry


__all__ = ["NamePrompt", "RegistryCommitExecutor"]
