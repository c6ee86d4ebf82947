"""Domain layer for the saved-search view.

Domain managers hold state and publish events; they have no dependency on Qt
or on any widget.

Domain Managers:
    - EntryRegistry: Ordered, observable collection of saved searches
"""

from __future__ import annotations

from .entry_registry import EntryRegistry

__all__: list[str] = ["EntryRegistry"]
