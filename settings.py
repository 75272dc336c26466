# settings.py - 2026-10-12
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

# ─────────────────────────── tunables ────────────────────────────
LIVE_SITE          = "https://www.qtes9gu0k.xyz"
MIRROR_PREFIX      = "/20260212/"
MIRROR_ORIGIN      = "http://localhost:8000"
RELAY_BASE         = "https://api.allorigins.win/get?url="
COMPANION_PORT     = 8081
DATA_PATH          = MIRROR_PREFIX + "wp-content/themes/qtes9gu0k/assets/data/"
KEY_MAP_FILE       = "key-map.json"
KEY_MAP_FALLBACK   = "/key-map.json"
RESULT_CLASS       = "p-5djb21-result"
LOADED_CLASS       = "is-loaded"
BUNDLE_SCRIPT      = "app.bundle.js"
STYLESHEET         = "app.css"
RESULT_AREA_ID     = "search-result-area"
RESULT_CONTAINER   = ".l-page__body .l-container--middle .p-5djb21"
FALLBACK_CONTAINER = ".l-main"
TIMEOUT            = 10
PROBE_TIMEOUT      = 5
OPEN_WORKERS       = 6
# ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SiteConfig:
    """Where the mirror lives, where the live site lives, and how to talk to both."""

    mirror_origin: str = MIRROR_ORIGIN
    live_site: str = LIVE_SITE
    mirror_prefix: str = MIRROR_PREFIX
    relay_base: str = RELAY_BASE
    companion_port: int = COMPANION_PORT
    data_path: str = DATA_PATH
    key_map: str | None = None          # overrides data_path + KEY_MAP_FILE
    result_class: str = RESULT_CLASS
    timeout: float = TIMEOUT

    # ---------- derived ----------
    @property
    def host(self) -> str:
        return urlsplit(self.mirror_origin).hostname or ""

    @property
    def companion_origin(self) -> str:
        parts = urlsplit(self.mirror_origin)
        host = self.host
        if ":" in host:
            host = f"[{host}]"
        return f"{parts.scheme or 'http'}://{host}:{self.companion_port}"

    @property
    def live_prefix(self) -> str:
        return self.live_site.rstrip("/") + "/"

    @property
    def key_map_url(self) -> str:
        return self.key_map or self.mirror_url(self.data_path + KEY_MAP_FILE)

    @property
    def key_map_fallback_url(self) -> str:
        return self.mirror_url(KEY_MAP_FALLBACK)

    @property
    def item_class(self) -> str:
        return self.result_class + "__item"

    @property
    def link_class(self) -> str:
        return self.result_class + "__link"

    @property
    def announce_class(self) -> str:
        return self.result_class + "__announce"

    def mirror_url(self, href: str) -> str:
        """Absolute URL on the mirror for a root-relative href."""
        if href.startswith(("http://", "https://")):
            return href
        return self.mirror_origin.rstrip("/") + "/" + href.lstrip("/")
