"""Data models shared by the saved-search UI layers."""

from .search_models import (
    AffordanceState,
    CommitRequest,
    ConfirmationRequest,
    EnableMode,
    PendingCommitPayload,
    RegistryState,
    RegistryStatus,
    SavedSearchEntry,
    SearchCriteria,
    SearchMode,
)

__all__ = [
    "AffordanceState",
    "CommitRequest",
    "ConfirmationRequest",
    "EnableMode",
    "PendingCommitPayload",
    "RegistryState",
    "RegistryStatus",
    "SavedSearchEntry",
    "SearchCriteria",
    "SearchMode",
]
