"""Infrastructure adapters for the saved-search view.

Adapters:
    - JsonFavoritesFetcher: fetch collaborator reading a JSON file
    - RegistryCommitExecutor: commit executor writing into the registry
"""

from __future__ import annotations

from .commit_executor import NamePrompt, RegistryCommitExecutor
from .favorites_source import JsonFavoritesFetcher

__all__ = ["JsonFavoritesFetcher", "NamePrompt", "RegistryCommitExecutor"]
