"""Dialog-backed collaborators for the saved-search view."""

from __future__ import annotations

from .notifiers import BusNotifier, QtNotifier

__all__ = ["BusNotifier", "QtNotifier"]
