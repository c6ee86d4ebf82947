"""User-facing strings for the saved-search view."""

from __future__ import annotations

import html
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Messages:
    """Notice and prompt texts shown by the commit controller."""

    no_search_filter: str = "Please select at least one search filter to save."
    no_favorite_selected: str = "Please select a saved search to overwrite."
    overwrite_prompt: str = "Do you want to overwrite the saved search"

    def overwrite_confirmation(self, name: str, *, is_html: bool = True) -> str:
        """Build the overwrite prompt for the entry called ``name``.

        In rich-text mode the name is HTML-escaped and wrapped in ``<b>``, so
        a name such as ``R&D <core>`` appears as ``R&amp;D &lt;core&gt;``.
        Plain-text prompts carry the name verbatim in double quotes.
        """
        if is_html:
            return f"{self.overwrite_prompt} <b>{html.escape(name)}</b> ?"
        return f"{self.overwrite_prompt} \"{name}\" ?"


DEFAULT_MESSAGES = Messages()

__all__ = ["Messages", "DEFAULT_MESSAGES"]
