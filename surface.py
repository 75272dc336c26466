# surface.py - 2026-10-14
"""
Where results and pages end up.

The search page is held as a bs4 document; the result area is one <div> in it,
created the first time something is rendered and overwritten from then on.
Opening pages is left to the concrete surface (a browser tab here, a recorder
in the tests).
"""

from __future__ import annotations

import tempfile
import webbrowser
from pathlib import Path
from typing import Callable, Dict, List, Optional

import click
from bs4 import BeautifulSoup, Tag

import markup
from settings import FALLBACK_CONTAINER, RESULT_AREA_ID, RESULT_CONTAINER, SiteConfig

EMPTY_PAGE = """<!DOCTYPE html>
<html><head><meta charset="utf-8"><title>Search</title></head>
<body><main class="l-main"><div class="l-page__body"><div class="l-container--middle">
<div class="p-5djb21"></div>
</div></div></main></body></html>"""


class ResultArea:
    """innerHTML-style wrapper around the result <div>, plus link interception."""

    def __init__(self, tag: Tag) -> None:
        self.tag = tag
        self._handlers: Dict[str, Callable[[str], object]] = {}
        self.links: List[str] = []

    def write(self, html: str) -> None:
        self.tag.clear()
        fragment = BeautifulSoup(html, "html.parser")
        for node in list(fragment.contents):
            self.tag.append(node.extract())
        self._handlers.clear()
        self.links = []

    @property
    def html(self) -> str:
        return self.tag.decode_contents()

    @property
    def text(self) -> str:
        return markup.page_text(self.html)

    def intercept(self, selector: str, handler: Callable[[str], object]) -> int:
        """Route clicks on every matching link with an href to `handler`."""
        for a in self.tag.select(selector):
            href = a.get("href")
            if href and href not in self._handlers:
                self._handlers[href] = handler
                self.links.append(href)
        return len(self.links)

    def titles(self) -> List[str]:
        out = []
        for href in self.links:
            a = self.tag.find("a", href=href)
            out.append(markup.link_title(a) if a else href)
        return out

    def click(self, target: "str | int"):
        """Follow an intercepted link, by href or by 1-based position."""
        href = self.links[target - 1] if isinstance(target, int) else target
        handler = self._handlers.get(href)
        if handler is None:
            raise KeyError(f"no intercepted link {target!r}")
        return handler(href)


class Surface:
    """A page holding a single result area, and a way to open new views."""

    def __init__(self, soup: BeautifulSoup | None = None) -> None:
        self.soup = soup if soup is not None else BeautifulSoup(EMPTY_PAGE, "html.parser")
        self._area: Optional[ResultArea] = None

    def result_area(self) -> ResultArea:
        if self._area is not None:
            return self._area
        tag = self.soup.find(id=RESULT_AREA_ID)
        if tag is None:
            tag = self.soup.new_tag("div", id=RESULT_AREA_ID, style="margin-top: 2em;")
            container = (self.soup.select_one(RESULT_CONTAINER)
                         or self.soup.select_one(FALLBACK_CONTAINER)
                         or self.soup.body
                         or self.soup)
            container.append(tag)
        self._area = ResultArea(tag)
        return self._area

    def open_view(self, url: str) -> None:
        """Show a mirror page in a new view; subclasses must override."""
        raise NotImplementedError

    def open_blank(self, html: str) -> None:
        """Write markup into a fresh blank view; subclasses must override."""
        raise NotImplementedError

    def alert(self, message: str) -> None:
        """Blocking user-visible message; subclasses must override."""
        raise NotImplementedError


class BrowserSurface(Surface):
    """Opens pages in the desktop browser; alerts go to stderr."""

    def __init__(self, config: SiteConfig, soup: BeautifulSoup | None = None) -> None:
        super().__init__(soup)
        self.config = config

    def open_view(self, url: str) -> None:
        webbrowser.open_new_tab(self.config.mirror_url(url))

    def open_blank(self, html: str) -> None:
        with tempfile.NamedTemporaryFile("w", suffix=".html", delete=False,
                                         encoding="utf-8") as fh:
            fh.write(html)
        webbrowser.open_new_tab(Path(fh.name).as_uri())

    def alert(self, message: str) -> None:
        click.echo(click.style(f"⚠️  {message}", fg="red"), err=True)
