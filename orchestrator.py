# orchestrator.py - 2026-10-15
"""
Search form → transport → result extractor → result area.

    IDLE ──submit(q)──▶ LOADING ──▶ RESULTS | EMPTY | ERROR

Submissions are not sequenced: two in flight both write the result area and
the one that finishes last is what stays on screen.
"""

from __future__ import annotations

import enum
import html as html_lib
from typing import Optional

import markup
from keypad import Keypad
from resolver import PageResolver
from surface import Surface
from transport import Transport, TransportError


class SearchState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESULTS = "results"
    EMPTY = "empty"
    ERROR = "error"


class SearchOrchestrator:
    def __init__(self, transport: Transport, surface: Surface,
                 resolver: Optional[PageResolver] = None) -> None:
        self.transport = transport
        self.surface = surface
        self.resolver = resolver or PageResolver(transport, surface)
        self.config = transport.config
        self.state = SearchState.IDLE
        self.error: Optional[str] = None

    # ---------- rendering ----------
    def _announce(self, text: str) -> str:
        return (f'<div class="{self.config.result_class}">'
                f'<div class="{self.config.announce_class}">'
                f"<p>{text}</p>"
                "</div></div>")

    def _show_loading(self, query: str) -> None:
        self.state = SearchState.LOADING
        self.surface.result_area().write(
            self._announce(f'"{html_lib.escape(query)}" searching...'))

    def _show_results(self, fragment: str) -> None:
        area = self.surface.result_area()
        area.write(fragment)
        area.intercept(f"a.{self.config.link_class}", self.resolver.open)
        self.state = SearchState.RESULTS

    def _show_empty(self, query: str) -> None:
        self.surface.result_area().write(
            self._announce(f'"{html_lib.escape(query)}" - no results'))
        self.state = SearchState.EMPTY

    def _show_error(self, message: str) -> None:
        self.error = message
        self.surface.result_area().write(
            '<div style="color:red; padding:1em; border:1px solid red; margin-top:1em;">'
            f"<strong>Error:</strong> {html_lib.escape(message)}</div>")
        self.state = SearchState.ERROR

    # ---------- public ----------
    def submit(self, query: str) -> SearchState:
        if not query:
            return self.state
        self.error = None
        self._show_loading(query)
        try:
            page = self.transport.retrieve(self.transport.resolve_search_endpoint(query))
        except TransportError as exc:
            self._show_error(f"Search error: {exc.message}\n{self.transport.hint}")
            return self.state

        fragment = markup.extract_results(page, self.config) if markup.has_results(page, self.config) else None
        if fragment and markup.count_items(fragment, self.config):
            self._show_results(fragment)
        else:
            self._show_empty(query)
        return self.state

    def submit_keypad(self, keypad: Keypad) -> SearchState:
        return self.submit(keypad.value)
