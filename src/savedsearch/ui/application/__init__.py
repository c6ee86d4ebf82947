"""Application layer for the saved-search view.

Use cases orchestrate the domain registry and external collaborators; none of
them touch widgets directly.

Use Cases:
    - SelectionCommitController: "save" / "save as" intents and save gating
    - RegistryObserver: loading/empty/error indicator synchronisation
"""

from __future__ import annotations

from .registry_observer import RegistryObserver
from .save_search_ops import (
    CommitExecutor,
    CriteriaAccessor,
    Notifier,
    SaveOutcome,
    SaveResult,
    SelectionCommitController,
)

__all__: list[str] = [
    "CommitExecutor",
    "CriteriaAccessor",
    "Notifier",
    "RegistryObserver",
    "SaveOutcome",
    "SaveResult",
    "SelectionCommitController",
]
