"""Notifier implementations for the presentation layer.

Both classes implement the ``Notifier`` protocol from the application layer:

- BusNotifier: headless; publishes notices and confirmation requests on the
  event bus and keeps unresolved requests so a driver can answer them later.
- QtNotifier: shows ``QMessageBox`` prompts and resolves the request from the
  box's finished signal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ...events import ConfirmationRequested, NoticePosted

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...events import EventBus
    from ...models.search_models import ConfirmationRequest

try:  # pragma: no cover - optional Qt dependency
    from PySide6.QtCore import Qt
    from PySide6.QtWidgets import QMessageBox

    _QT_AVAILABLE = True
except Exception:  # pragma: no cover - headless fallback
    Qt = None  # type: ignore[assignment]
    QMessageBox = None  # type: ignore[assignment]
    _QT_AVAILABLE = False

LOGGER = logging.getLogger(__name__)


class BusNotifier:
    """Publishes notices and confirmations as events.

    Example:
        notifier = BusNotifier(bus)
        controller.save()
        notifier.resolve_next(accept=True)
    """

    __slots__ = ("_bus", "_pending", "notices")

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._pending: list[ConfirmationRequest] = []
        self.notices: list[str] = []

    @property
    def pending(self) -> tuple[ConfirmationRequest, ...]:
        return tuple(request for request in self._pending if not request.resolved)

    def notify_info(self, message: str) -> None:
        self.notices.append(message)
        LOGGER.info("Notice: %s", message)
        self._bus.publish(NoticePosted(message=message))

    def notify_confirm(self, request: ConfirmationRequest) -> None:
        self._pending.append(request)
        self._bus.publish(ConfirmationRequested(request=request))

    def resolve_next(self, *, accept: bool) -> bool:
        """Answer the oldest unresolved confirmation.

        Returns:
            False when nothing was pending.
        """
        self._pending = [request for request in self._pending if not request.resolved]
        if not self._pending:
            return False
        request = self._pending.pop(0)
        return request.accept() if accept else request.decline()


class QtNotifier:
    """Shows notices and confirmations with ``QMessageBox``.

    Confirmations are opened with ``open()`` so the Qt event loop keeps
    running; the request resolves when the box finishes. Without Qt the
    notifier logs notices and declines confirmations.
    """

    def __init__(
        self,
        *,
        parent_provider: Callable[[], Any] | None = None,
        title: str = "Saved Searches",
        enable_qt: bool | None = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            parent_provider: Function returning the parent widget for dialogs.
            title: Window title for the message boxes.
            enable_qt: Force Qt on/off; defaults to Qt availability.
        """
        self._parent_provider = parent_provider
        self._title = title
        if enable_qt is None:
            self._qt_enabled = bool(_QT_AVAILABLE)
        else:
            self._qt_enabled = bool(enable_qt and _QT_AVAILABLE)
        self._open_boxes: list[Any] = []

    def notify_info(self, message: str) -> None:
        LOGGER.info("Notice: %s", message)
        if not self._qt_enabled or QMessageBox is None:
            return
        box = QMessageBox(self._parent())
        box.setIcon(QMessageBox.Icon.Information)
        box.setWindowTitle(self._title)
        box.setText(message)
        box.setModal(False)
        self._track(box)
        box.show()

    def notify_confirm(self, request: ConfirmationRequest) -> None:
        if not self._qt_enabled or QMessageBox is None:
            LOGGER.warning("No dialog support available; declining confirmation")
            request.decline()
            return

        box = QMessageBox(self._parent())
        box.setIcon(QMessageBox.Icon.Question)
        box.setWindowTitle(self._title)
        if Qt is not None:
            box.setTextFormat(Qt.TextFormat.RichText if request.is_html else Qt.TextFormat.PlainText)
            box.setWindowModality(
                Qt.WindowModality.WindowModal if request.is_modal else Qt.WindowModality.NonModal
            )
        box.setText(request.message)
        box.setStandardButtons(QMessageBox.StandardButton.Ok | QMessageBox.StandardButton.Cancel)
        box.setDefaultButton(QMessageBox.StandardButton.Cancel)

        def _finished(result: int) -> None:
            clicked = box.clickedButton()
            if clicked is not None and box.standardButton(clicked) == QMessageBox.StandardButton.Ok:
                request.accept()
            else:
                request.decline()

        box.finished.connect(_finished)  # type: ignore[attr-defined]
        self._track(box)
        box.open()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _parent(self) -> Any:
        if self._parent_provider is None:
            return None
        return self._parent_provider()

    def _track(self, box: Any) -> None:
        # Keep a reference until the box closes so it is not garbage collected
        self._open_boxes.append(box)

        def _release(*_args: Any) -> None:
            if box in self._open_boxes:
                self._open_boxes.remove(box)

        box.finished.connect(_release)  # type: ignore[attr-defined]


__all__ = ["BusNotifier", "QtNotifier"]
