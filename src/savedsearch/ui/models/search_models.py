"""Saved-search data models.

These dataclasses describe saved entries, the user's current criteria and the
transient payloads exchanged between the commit controller and its
collaborators. They carry no behaviour beyond small derived properties.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:  # pragma: no cover
    from ..domain.entry_registry import EntryRegistry

LOGGER = logging.getLogger(__name__)

_FILTER_FIELDS: tuple[str, ...] = ("type", "tag", "query")


class SearchMode(str, Enum):
    """Which search form produced the criteria being saved."""

    BASIC = "basic"
    ADVANCED = "advanced"

    @classmethod
    def from_flag(cls, is_basic: bool) -> "SearchMode":
        return cls.BASIC if is_basic else cls.ADVANCED

    @classmethod
    def parse(cls, value: Any, default: "SearchMode | None" = None) -> "SearchMode":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        if default is not None:
            return default
        raise ValueError(f"Unknown search mode '{value}'")


class EnableMode(str, Enum):
    """How the "save" trigger tracks the selection.

    ``LATCH`` enables the trigger on the first click and never disables it
    again. ``DERIVED`` mirrors whether an entry is currently selected.
    """

    LATCH = "latch"
    DERIVED = "derived"

    @classmethod
    def parse(cls, value: Any, default: "EnableMode | None" = None) -> "EnableMode":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        if default is not None:
            return default
        raise ValueError(f"Unknown enable mode '{value}'")


@dataclass(slots=True, frozen=True)
class SearchCriteria:
    """The search definition currently entered by the user.

    Attributes:
        type: Entity type filter.
        tag: Classification/tag filter.
        query: Free-text query.
        extras: Any other fields the search form supplied, kept opaque.
    """

    type: str | None = None
    tag: str | None = None
    query: str | None = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    def has_filter(self) -> bool:
        """Return True when at least one of type, tag or query is set."""
        return bool(self.type or self.tag or self.query)

    @classmethod
    def coerce(cls, value: Any) -> "SearchCriteria":
        """Build criteria from whatever the caller's accessor returned.

        Accepts ``None``, an existing :class:`SearchCriteria`, a mapping, or
        any object exposing ``type``/``tag``/``query`` attributes.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, Mapping):
            extras = {key: item for key, item in value.items() if key not in _FILTER_FIELDS}
            return cls(
                type=value.get("type"),
                tag=value.get("tag"),
                query=value.get("query"),
                extras=extras,
            )
        return cls(
            type=getattr(value, "type", None),
            tag=getattr(value, "tag", None),
            query=getattr(value, "query", None),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extras)
        for name in _FILTER_FIELDS:
            item = getattr(self, name)
            if item is not None:
                payload[name] = item
        return payload


@dataclass(slots=True, frozen=True)
class SavedSearchEntry:
    """One saved search definition.

    Attributes:
        id: Stable identity (the backend guid).
        name: Display name shown in the list and in confirmation text.
        criteria: The stored search definition.
    """

    id: str
    name: str
    criteria: SearchCriteria = field(default_factory=SearchCriteria)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "SavedSearchEntry":
        entry_id = payload.get("id") or payload.get("guid")
        if not entry_id:
            raise ValueError("Saved search entry is missing an id")
        name = str(payload.get("name") or entry_id)
        return cls(
            id=str(entry_id),
            name=name,
            criteria=SearchCriteria.coerce(payload.get("criteria")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "criteria": self.criteria.to_dict()}


@dataclass(slots=True, frozen=True)
class PendingCommitPayload:
    """Identifies the entry a confirmed "save" will overwrite."""

    name: str
    guid: str


@dataclass(slots=True, frozen=True)
class CommitRequest:
    """Everything the commit executor needs to create or overwrite an entry.

    Attributes:
        registry: The registry the entry belongs (or will belong) to.
        accessor: Zero-argument callable returning the current criteria.
        mode: Search mode the criteria came from.
        pending_payload: Set for overwrite-of-existing, None for create-new.
    """

    registry: "EntryRegistry"
    accessor: Callable[[], Any]
    mode: SearchMode = SearchMode.BASIC
    pending_payload: PendingCommitPayload | None = None

    @property
    def is_overwrite(self) -> bool:
        return self.pending_payload is not None


@dataclass(slots=True)
class ConfirmationRequest:
    """A yes/no prompt whose continuations run exactly once.

    Whichever of :meth:`accept` or :meth:`decline` is called first wins; any
    later call is ignored and returns False.

    Attributes:
        message: Prompt text, possibly containing HTML markup.
        on_accept: Continuation for the affirmative answer.
        on_decline: Continuation for the negative answer.
        is_html: Whether ``message`` should be rendered as rich text.
        is_modal: Whether the prompt blocks the rest of the view.
    """

    message: str
    on_accept: Callable[[], None]
    on_decline: Callable[[], None] = lambda: None
    is_html: bool = True
    is_modal: bool = True
    accepted: bool | None = None

    @property
    def resolved(self) -> bool:
        return self.accepted is not None

    def accept(self) -> bool:
        return self._resolve(True)

    def decline(self) -> bool:
        return self._resolve(False)

    def _resolve(self, accepted: bool) -> bool:
        if self.accepted is not None:
            LOGGER.debug(
                "ConfirmationRequest already resolved (accepted=%s); ignoring %s",
                self.accepted,
                "accept" if accepted else "decline",
            )
            return False
        self.accepted = accepted
        if accepted:
            self.on_accept()
        else:
            self.on_decline()
        return True


class RegistryStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class RegistryState:
    """Tagged snapshot of the registry.

    Attributes:
        status: Which variant the registry is in.
        entries: Entries known at the time of the snapshot.
        reason: Failure description when ``status`` is FAILED.
    """

    status: RegistryStatus
    entries: tuple[SavedSearchEntry, ...] = ()
    reason: str | None = None

    @classmethod
    def loading(cls, entries: tuple[SavedSearchEntry, ...] = ()) -> "RegistryState":
        return cls(RegistryStatus.LOADING, entries)

    @classmethod
    def from_entries(cls, entries: tuple[SavedSearchEntry, ...]) -> "RegistryState":
        status = RegistryStatus.POPULATED if entries else RegistryStatus.EMPTY
        return cls(status, entries)

    @classmethod
    def failed(cls, reason: str, entries: tuple[SavedSearchEntry, ...] = ()) -> "RegistryState":
        return cls(RegistryStatus.FAILED, entries, reason)


@dataclass(slots=True, frozen=True)
class AffordanceState:
    """Visibility of the loading, empty and error indicators."""

    loading_visible: bool = True
    empty_visible: bool = False
    error_visible: bool = False
    error_message: str = ""


__all__ = [
    "SearchMode",
    "EnableMode",
    "SearchCriteria",
    "SavedSearchEntry",
    "PendingCommitPayload",
    "CommitRequest",
    "ConfirmationRequest",
    "RegistryStatus",
    "RegistryState",
    "AffordanceState",
]
