# markup.py - 2026-10-13
"""
Live-site markup → mirror-safe markup, plus the search-results extractor.

Both work on a parsed document (bs4, stdlib html.parser) instead of raw text,
so attribute order, quoting and whitespace in the live template don't matter.
"""

from __future__ import annotations

import re
from itertools import islice
from typing import Callable, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from settings import BUNDLE_SCRIPT, LOADED_CLASS, STYLESHEET, SiteConfig

_DEFAULT = SiteConfig()
_RESULT_ANCESTRY = ["div", "div", "main"]


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def _attr_text(value) -> str:
    return " ".join(value) if isinstance(value, list) else str(value)


# ─────────────────────── transformation steps ───────────────────────
# Each step mutates the soup in place and reports whether it changed anything.

def _rewrite_origin(soup: BeautifulSoup, config: SiteConfig) -> bool:
    """Absolute live-origin references → mirror path prefix (attributes and text)."""
    old, new = config.live_prefix, config.mirror_prefix
    changed = False
    for tag in soup.find_all(True):
        for name, value in list(tag.attrs.items()):
            if isinstance(value, list):
                if any(old in v for v in value):
                    tag[name] = [v.replace(old, new) for v in value]
                    changed = True
            elif isinstance(value, str) and old in value:
                tag[name] = value.replace(old, new)
                changed = True
    for node in [n for n in soup.descendants if isinstance(n, NavigableString)]:
        if old in node:
            node.replace_with(type(node)(node.replace(old, new)))
            changed = True
    return changed


def _neutralize_bundle(soup: BeautifulSoup, config: SiteConfig) -> bool:
    """Live-only bundle <script> → inert comment keeping its attributes."""
    changed = False
    for script in soup.find_all("script"):
        if not any(BUNDLE_SCRIPT in _attr_text(v) for v in script.attrs.values()):
            continue
        attrs = "".join(f' {k}="{_attr_text(v)}"' for k, v in script.attrs.items())
        script.replace_with(Comment(f" <script{attrs}></script> "))
        changed = True
    return changed


def _strip_css_version(soup: BeautifulSoup, config: SiteConfig) -> bool:
    changed = False
    for link in soup.find_all("link", href=True):
        try:
            parts = urlsplit(link["href"])
        except ValueError:
            continue
        if not parts.path.endswith(STYLESHEET) or not parts.query:
            continue
        query = parse_qsl(parts.query, keep_blank_values=True)
        kept = [(k, v) for k, v in query if k != "ver"]
        if len(kept) == len(query):
            continue
        link["href"] = urlunsplit(parts._replace(query=urlencode(kept)))
        changed = True
    return changed


def _mark_loaded(soup: BeautifulSoup, config: SiteConfig) -> bool:
    changed = False
    for item in soup.find_all(class_=config.item_class):
        classes = item.get("class", [])
        if LOADED_CLASS not in classes:
            item["class"] = list(classes) + [LOADED_CLASS]
            changed = True
    return changed


# order is fixed for reproducible output
_PIPELINE: tuple[Callable[[BeautifulSoup, SiteConfig], bool], ...] = (
    _rewrite_origin,
    _neutralize_bundle,
    _strip_css_version,
    _mark_loaded,
)


def transform(html: str, config: SiteConfig = _DEFAULT) -> str:
    """
    Make fetched live-site markup safe to show inside the mirror.

    Markup none of the steps touch comes back as the very same string, and
    output fed back in comes back unchanged.
    """
    if not html:
        return html
    soup = _soup(html)
    changed = [step(soup, config) for step in _PIPELINE]
    return str(soup) if any(changed) else html


# ─────────────────────── result extraction ───────────────────────
def has_results(html: str, config: SiteConfig = _DEFAULT) -> bool:
    """Cheap marker check: does the page mention a result item at all?"""
    return bool(html) and config.item_class in html


def extract_results(html: str, config: SiteConfig = _DEFAULT) -> Optional[str]:
    """
    Isolate the results region: the `div.<result>` sitting in div > div > main,
    which is where the live page template closes it. None if the page shape
    doesn't match.
    """
    if not html:
        return None
    soup = _soup(html)
    for region in soup.find_all("div", class_=config.result_class):
        ancestry = [p.name for p in islice(region.parents, len(_RESULT_ANCESTRY))]
        if ancestry == _RESULT_ANCESTRY:
            return str(region)
    return None


def count_items(fragment: str, config: SiteConfig = _DEFAULT) -> int:
    return len(_soup(fragment).find_all(class_=config.item_class)) if fragment else 0


def result_links(fragment: str, config: SiteConfig = _DEFAULT) -> List[str]:
    if not fragment:
        return []
    return [a["href"] for a in _soup(fragment).find_all("a", class_=config.link_class, href=True)]


def page_text(html: str, max_length: int = 3500) -> str:
    """Readable text of a page or fragment, for console rendering."""
    if not html:
        return ""
    soup = _soup(html)
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = soup.get_text(" ", strip=True)
    text = re.sub(r"\s+", " ", text)
    return text[:max_length]


def link_title(tag: Tag) -> str:
    return re.sub(r"\s+", " ", tag.get_text(" ", strip=True))
