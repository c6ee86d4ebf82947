"""Saved-search panel with optional Qt widgets.

The panel mirrors the state published on the event bus (save trigger
enablement, loading/empty/error indicators and the rendered list) so it can be
driven and inspected without a display.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...events import AffordancesChanged, SaveActionStateChanged

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...application.save_search_ops import SaveResult, SelectionCommitController
    from ...events import EventBus
    from ..item_presenter import ItemListPresenter

try:  # pragma: no cover - Qt imports are optional during tests
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import (
        QHBoxLayout,
        QLabel,
        QListWidget,
        QListWidgetItem,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )

    _QT_AVAILABLE = True
except Exception:  # pragma: no cover - PySide6 not available
    Qt = None  # type: ignore[assignment]
    QHBoxLayout = None  # type: ignore[assignment]
    QLabel = None  # type: ignore[assignment]
    QListWidget = None  # type: ignore[assignment]
    QListWidgetItem = None  # type: ignore[assignment]
    QPushButton = None  # type: ignore[assignment]
    QVBoxLayout = None  # type: ignore[assignment]
    QWidget = None  # type: ignore[assignment]
    _QT_AVAILABLE = False

LOGGER = logging.getLogger(__name__)

EMPTY_TEXT = "You don't have any saved searches."
LOADING_TEXT = "Loading saved searches…"


@dataclass(slots=True, frozen=True)
class PanelItem:
    """One rendered row of the list."""

    entry_id: str
    name: str
    active: bool


class SavedSearchPanel:
    """List of saved searches with "Save As" and "Save" triggers."""

    def __init__(
        self,
        controller: SelectionCommitController,
        list_presenter: ItemListPresenter,
        event_bus: EventBus,
        *,
        parent: Any | None = None,
        enable_qt: bool | None = None,
    ) -> None:
        self._controller = controller
        self._list = list_presenter
        self._bus = event_bus
        self._parent = parent
        if enable_qt is None:
            self._qt_enabled = bool(_QT_AVAILABLE)
        else:
            self._qt_enabled = bool(enable_qt and _QT_AVAILABLE)

        self.save_enabled: bool = controller.save_enabled
        self.loading_visible: bool = True
        self.empty_visible: bool = False
        self.error_visible: bool = False
        self.error_message: str = ""
        self.items: tuple[PanelItem, ...] = ()

        self._widget: Any = None
        self._list_widget: Any = None
        self._save_button: Any = None
        self._save_as_button: Any = None
        self._loading_label: Any = None
        self._empty_label: Any = None
        self._error_label: Any = None
        self._syncing = False

        if self._qt_enabled:
            self._build_widget()

        event_bus.subscribe(SaveActionStateChanged, self._on_save_state_changed)
        event_bus.subscribe(AffordancesChanged, self._on_affordances_changed)
        list_presenter.add_listener(self._render_items)
        self._render_items()
        self._apply_visibility()

    @property
    def widget(self) -> Any:
        """The Qt widget, or None in headless mode."""
        return self._widget

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def click_item(self, entry_id: str) -> bool:
        return self._list.click(entry_id)

    def trigger_save(self) -> SaveResult | None:
        if not self.save_enabled:
            LOGGER.debug("Save trigger is disabled; ignoring")
            return None
        return self._controller.save()

    def trigger_save_as(self) -> SaveResult:
        return self._controller.save_as()

    def apply_item(self, entry_id: str) -> bool:
        presenter = self._list.presenter_for(entry_id)
        if presenter is None:
            return False
        return presenter.apply()

    def dispose(self) -> None:
        self._bus.unsubscribe(SaveActionStateChanged, self._on_save_state_changed)
        self._bus.unsubscribe(AffordancesChanged, self._on_affordances_changed)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_save_state_changed(self, event: SaveActionStateChanged) -> None:
        self.save_enabled = event.enabled
        if self._save_button is not None:
            self._save_button.setEnabled(event.enabled)

    def _on_affordances_changed(self, event: AffordancesChanged) -> None:
        self.loading_visible = event.loading_visible
        self.empty_visible = event.empty_visible
        self.error_visible = event.error_visible
        self.error_message = event.error_message
        self._apply_visibility()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_items(self) -> None:
        previous = self.items
        self.items = tuple(
            PanelItem(entry_id=p.entry_id, name=p.display_name, active=p.active)
            for p in self._list.presenters()
        )
        if self._list_widget is None:
            return
        if _row_keys(previous) == _row_keys(self.items):
            self._select_active_row()
        else:
            self._rebuild_rows()

    def _select_active_row(self) -> None:
        row = next((i for i, item in enumerate(self.items) if item.active), -1)
        self._syncing = True
        try:
            self._list_widget.setCurrentRow(row)
        finally:
            self._syncing = False

    def _rebuild_rows(self) -> None:
        if QListWidgetItem is None:
            return
        self._syncing = True
        try:
            self._list_widget.clear()
            for item in self.items:
                row = QListWidgetItem(item.name)
                row.setData(Qt.ItemDataRole.UserRole, item.entry_id)
                self._list_widget.addItem(row)
                if item.active:
                    self._list_widget.setCurrentItem(row)
        finally:
            self._syncing = False

    def _apply_visibility(self) -> None:
        if self._loading_label is not None:
            self._loading_label.setVisible(self.loading_visible)
        if self._empty_label is not None:
            self._empty_label.setVisible(self.empty_visible)
        if self._error_label is not None:
            self._error_label.setText(self.error_message)
            self._error_label.setVisible(self.error_visible)

    def _build_widget(self) -> None:
        if QWidget is None or QVBoxLayout is None:
            return
        widget = QWidget(self._parent)
        widget.setObjectName("ss-saved-search-panel")
        layout = QVBoxLayout(widget)

        buttons = QHBoxLayout()
        save_as_button = QPushButton("Save As")
        save_as_button.setObjectName("ss-save-as")
        save_as_button.clicked.connect(self._handle_save_as_clicked)  # type: ignore[attr-defined]
        save_button = QPushButton("Save")
        save_button.setObjectName("ss-save")
        save_button.setEnabled(self.save_enabled)
        save_button.clicked.connect(self._handle_save_clicked)  # type: ignore[attr-defined]
        buttons.addWidget(save_as_button)
        buttons.addWidget(save_button)
        layout.addLayout(buttons)

        loading_label = QLabel(LOADING_TEXT)
        loading_label.setObjectName("ss-loading")
        empty_label = QLabel(EMPTY_TEXT)
        empty_label.setObjectName("ss-empty")
        error_label = QLabel("")
        error_label.setObjectName("ss-error")
        error_label.setWordWrap(True)
        layout.addWidget(loading_label)
        layout.addWidget(empty_label)
        layout.addWidget(error_label)

        list_widget = QListWidget()
        list_widget.setObjectName("ss-saved-search-list")
        list_widget.itemClicked.connect(self._handle_item_clicked)  # type: ignore[attr-defined]
        list_widget.itemDoubleClicked.connect(self._handle_item_activated)  # type: ignore[attr-defined]
        layout.addWidget(list_widget)

        self._widget = widget
        self._list_widget = list_widget
        self._save_button = save_button
        self._save_as_button = save_as_button
        self._loading_label = loading_label
        self._empty_label = empty_label
        self._error_label = error_label

    def _handle_save_clicked(self) -> None:
        self.trigger_save()

    def _handle_save_as_clicked(self) -> None:
        self.trigger_save_as()

    def _handle_item_clicked(self, item: Any) -> None:
        if self._syncing or item is None:
            return
        self.click_item(item.data(Qt.ItemDataRole.UserRole))

    def _handle_item_activated(self, item: Any) -> None:
        if item is None:
            return
        self.apply_item(item.data(Qt.ItemDataRole.UserRole))


def _row_keys(items: tuple[PanelItem, ...]) -> tuple[tuple[str, str], ...]:
    return tuple((item.entry_id, item.name) for item in items)


__all__ = ["PanelItem", "SavedSearchPanel", "EMPTY_TEXT", "LOADING_TEXT"]
