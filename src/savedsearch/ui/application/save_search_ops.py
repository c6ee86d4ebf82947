"""Saved-search commit use cases.

This module provides the selection/commit workflow:
- save_as: persist the current criteria as a brand-new entry
- save: overwrite the selected entry after an explicit confirmation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Protocol

from ..events import (
    CommitLaunched,
    ItemClicked,
    SaveActionStateChanged,
    SelectionCleared,
)
from ..messages import DEFAULT_MESSAGES, Messages
from ..models.search_models import (
    CommitRequest,
    ConfirmationRequest,
    EnableMode,
    PendingCommitPayload,
    SearchCriteria,
    SearchMode,
)

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ..domain.entry_registry import EntryRegistry
    from ..events import EventBus

LOGGER = logging.getLogger(__name__)

CriteriaAccessor = Callable[[], Any]


class Notifier(Protocol):
    """Protocol for informational notices and yes/no confirmations."""

    def notify_info(self, message: str) -> None:
        """Show a non-blocking informational notice."""
        ...

    def notify_confirm(self, request: ConfirmationRequest) -> None:
        """Present ``request`` and resolve it once the user answers.

        Implementations must eventually call exactly one of
        ``request.accept()`` or ``request.decline()``.
        """
        ...


class CommitExecutor(Protocol):
    """Protocol for the collaborator that actually creates/overwrites entries."""

    def launch(self, request: CommitRequest) -> None:
        """Start the create (no pending payload) or overwrite flow."""
        ...


class SaveOutcome(str, Enum):
    """Terminal (or pending) state of one save/save-as attempt."""

    LAUNCHED = "launched"
    CONFIRMING = "confirming"
    DECLINED = "declined"
    NO_FILTER = "no-filter"
    NO_SELECTION = "no-selection"
    BUSY = "busy"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class SaveResult:
    """Result of a save or save-as attempt.

    Attributes:
        outcome: What happened.
        message: Human-readable status message.
        pending_payload: The entry targeted by a save, if any.
    """

    outcome: SaveOutcome
    message: str = ""
    pending_payload: PendingCommitPayload | None = None


class SelectionCommitController:
    """Orchestrates the "save" and "save as" intents of the saved-search view.

    The controller tracks which entry is selected from ``ItemClicked`` and
    ``SelectionCleared`` events, gates the save trigger, validates
    preconditions, and hands off to the notifier and the commit executor.
    Nothing raises out of :meth:`save` or :meth:`save_as`; every failure path
    ends in a notice, a logged error, or a no-op.

    Events Emitted:
        - SaveActionStateChanged: When the save trigger toggles
        - CommitLaunched: After the commit executor receives a request
    """

    __slots__ = (
        "_registry",
        "_accessor",
        "_notifier",
        "_executor",
        "_bus",
        "_mode",
        "_enable_mode",
        "_messages",
        "_confirm_html",
        "_confirm_modal",
        "_selected_id",
        "_save_enabled",
        "_pending",
        "_launch_failed",
        "__weakref__",
    )

    def __init__(
        self,
        registry: EntryRegistry,
        accessor: CriteriaAccessor,
        notifier: Notifier,
        commit_executor: CommitExecutor,
        event_bus: EventBus,
        *,
        mode: SearchMode = SearchMode.BASIC,
        enable_mode: EnableMode = EnableMode.LATCH,
        messages: Messages | None = None,
        confirm_html: bool = True,
        confirm_modal: bool = True,
    ) -> None:
        """Initialize the controller and subscribe to selection events.

        Args:
            registry: The registry of saved entries.
            accessor: Zero-argument callable returning the current criteria.
            notifier: Notice/confirmation collaborator.
            commit_executor: Collaborator that performs the persistence.
            event_bus: Event bus for selection and state events.
            mode: Whether the criteria come from the basic or advanced form.
            enable_mode: How the save trigger follows the selection.
            messages: Notice/prompt texts.
            confirm_html: Render the overwrite prompt as rich text.
            confirm_modal: Ask the notifier for a modal prompt.
        """
        self._registry = registry
        self._accessor = accessor
        self._notifier = notifier
        self._executor = commit_executor
        self._bus = event_bus
        self._mode = mode
        self._enable_mode = enable_mode
        self._messages = messages or DEFAULT_MESSAGES
        self._confirm_html = confirm_html
        self._confirm_modal = confirm_modal
        self._selected_id: str | None = None
        self._save_enabled = False
        self._pending: ConfirmationRequest | None = None
        self._launch_failed = False

        event_bus.subscribe(ItemClicked, self._on_item_clicked)
        event_bus.subscribe(SelectionCleared, self._on_selection_cleared)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def save_enabled(self) -> bool:
        return self._save_enabled

    @property
    def confirmation_pending(self) -> bool:
        return self._pending is not None

    @property
    def mode(self) -> SearchMode:
        return self._mode

    @property
    def enable_mode(self) -> EnableMode:
        return self._enable_mode

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def save_as(self) -> SaveResult:
        """Persist the current criteria as a new entry.

        Returns:
            SaveResult with outcome LAUNCHED, NO_FILTER or FAILED.
        """
        try:
            criteria = SearchCriteria.coerce(self._accessor())
        except Exception:
            LOGGER.exception("Reading the current search criteria failed")
            return SaveResult(SaveOutcome.FAILED, "Unable to read the current search")

        if not criteria.has_filter():
            LOGGER.debug("save_as rejected: no type, tag or query selected")
            return self._notify(SaveOutcome.NO_FILTER, self._messages.no_search_filter)

        request = CommitRequest(
            registry=self._registry,
            accessor=self._accessor,
            mode=self._mode,
        )
        if not self._launch(request):
            return SaveResult(SaveOutcome.FAILED, "Unable to start saving the search")
        return SaveResult(SaveOutcome.LAUNCHED, "Saving new search")

    def save(self) -> SaveResult:
        """Overwrite the selected entry with the current criteria, after confirmation.

        Returns:
            SaveResult whose outcome is BUSY, NO_SELECTION, CONFIRMING,
            LAUNCHED, DECLINED or FAILED.
        """
        if self._pending is not None:
            LOGGER.debug("save ignored: a confirmation is already pending")
            return SaveResult(SaveOutcome.BUSY, "A save is already awaiting confirmation")

        entry = self._registry.get(self._selected_id) if self._selected_id else None
        if entry is None:
            LOGGER.debug("save rejected: no entry selected (selected_id=%s)", self._selected_id)
            return self._notify(SaveOutcome.NO_SELECTION, self._messages.no_favorite_selected)

        payload = PendingCommitPayload(name=entry.name, guid=entry.id)
        request = ConfirmationRequest(
            message=self._messages.overwrite_confirmation(entry.name, is_html=self._confirm_html),
            on_accept=lambda: self._on_confirm_accepted(payload),
            on_decline=lambda: self._on_confirm_declined(payload),
            is_html=self._confirm_html,
            is_modal=self._confirm_modal,
        )
        self._pending = request
        LOGGER.debug("save: requesting confirmation to overwrite guid=%s", payload.guid)

        try:
            self._notifier.notify_confirm(request)
        except Exception:
            LOGGER.exception("Confirmation prompt failed for guid=%s", payload.guid)
            if self._pending is request:
                self._pending = None
            return SaveResult(SaveOutcome.FAILED, "Unable to ask for confirmation", payload)

        if request.accepted is None:
            return SaveResult(SaveOutcome.CONFIRMING, request.message, payload)
        if request.accepted and self._launch_failed:
            return SaveResult(SaveOutcome.FAILED, "Unable to start overwriting the search", payload)
        if request.accepted:
            return SaveResult(SaveOutcome.LAUNCHED, f"Overwriting {payload.name}", payload)
        return SaveResult(SaveOutcome.DECLINED, "Overwrite cancelled", payload)

    def dispose(self) -> None:
        """Stop listening to selection events (view teardown)."""
        self._bus.unsubscribe(ItemClicked, self._on_item_clicked)
        self._bus.unsubscribe(SelectionCleared, self._on_selection_cleared)
        self._pending = None

    # ------------------------------------------------------------------
    # Confirmation continuations
    # ------------------------------------------------------------------

    def _on_confirm_accepted(self, payload: PendingCommitPayload) -> None:
        self._pending = None
        request = CommitRequest(
            registry=self._registry,
            accessor=self._accessor,
            mode=self._mode,
            pending_payload=payload,
        )
        self._launch_failed = not self._launch(request)

    def _on_confirm_declined(self, payload: PendingCommitPayload) -> None:
        self._pending = None
        LOGGER.debug("save: overwrite of guid=%s declined", payload.guid)

    # ------------------------------------------------------------------
    # Selection tracking
    # ------------------------------------------------------------------

    def _on_item_clicked(self, event: ItemClicked) -> None:
        self._selected_id = event.entry_id
        self._refresh_enabled()

    def _on_selection_cleared(self, event: SelectionCleared) -> None:
        if event.entry_id is not None and event.entry_id != self._selected_id:
            return
        self._selected_id = None
        self._refresh_enabled()

    def _refresh_enabled(self) -> None:
        if self._enable_mode is EnableMode.LATCH:
            enabled = self._save_enabled or self._selected_id is not None
        else:
            enabled = self._selected_id is not None
        if enabled == self._save_enabled:
            return
        self._save_enabled = enabled
        LOGGER.debug("Save action %s", "enabled" if enabled else "disabled")
        self._bus.publish(SaveActionStateChanged(enabled=enabled))

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _launch(self, request: CommitRequest) -> bool:
        guid = request.pending_payload.guid if request.pending_payload else None
        try:
            self._executor.launch(request)
        except Exception:
            LOGGER.exception("Commit executor failed (mode=%s, guid=%s)", request.mode.value, guid)
            return False
        LOGGER.debug(
            "Commit launched: mode=%s, overwrite=%s, guid=%s",
            request.mode.value,
            request.is_overwrite,
            guid,
        )
        self._bus.publish(CommitLaunched(
            mode=request.mode.value,
            overwrite=request.is_overwrite,
            entry_id=guid,
        ))
        return True

    def _notify(self, outcome: SaveOutcome, message: str) -> SaveResult:
        try:
            self._notifier.notify_info(message)
        except Exception:
            LOGGER.exception("Notifier failed to show notice: %s", message)
        return SaveResult(outcome, message)


__all__ = [
    "CriteriaAccessor",
    "Notifier",
    "CommitExecutor",
    "SaveOutcome",
    "SaveResult",
    "SelectionCommitController",
]
