# resolver.py - 2026-10-15
"""
Opening a result link: use the mirror's copy if it has one, otherwise fetch
the live page through the transport and show it in a blank view.
"""

from __future__ import annotations

import concurrent.futures
import enum
from typing import Iterable, List

import fetcher
from settings import OPEN_WORKERS, PROBE_TIMEOUT
from surface import Surface
from transport import Transport, TransportError


class Outcome(enum.Enum):
    LOCAL = "local"
    LIVE = "live"
    FAILED = "failed"


class PageResolver:
    def __init__(self, transport: Transport, surface: Surface) -> None:
        self.transport = transport
        self.surface = surface
        self.config = transport.config

    def live_url(self, local_href: str) -> str:
        """/<prefix>/a/b/ → <live-origin>/a/b/"""
        path = local_href.replace(self.config.mirror_prefix, "/", 1)
        return self.transport.resolve_page_endpoint(path)

    def open(self, local_href: str) -> Outcome:
        # stage 1: already materialized in the mirror?
        if fetcher.page_exists(self.config.mirror_url(local_href), timeout=PROBE_TIMEOUT):
            self.surface.open_view(local_href)
            return Outcome.LOCAL

        # stage 2: live fallback, markup is transformed in both modes by now
        try:
            html = self.transport.retrieve(self.live_url(local_href))
        except TransportError as exc:
            self.surface.alert(f"Failed to fetch page: {exc.message}")
            return Outcome.FAILED
        self.surface.open_blank(html)
        return Outcome.LIVE

    def open_many(self, hrefs: Iterable[str]) -> List[Outcome]:
        """Independent opens, run side by side; results keep input order."""
        hrefs = list(hrefs)
        if not hrefs:
            return []
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(OPEN_WORKERS, len(hrefs))
        ) as pool:
            return list(pool.map(self.open, hrefs))
