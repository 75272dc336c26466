# transport.py - 2026-10-13
"""
Two ways of getting live-site markup into the mirror, behind one `retrieve`.

  Direct  - the companion API next to a locally served mirror; it answers
            {ok, html, error?} with markup it has already transformed.
  Relay   - a public CORS relay for every other host; it answers {contents?}
            with raw markup that we transform here.

The mode is picked once from the mirror host and never changes afterwards.
"""

from __future__ import annotations

import enum
import ipaddress
from urllib.parse import quote

import requests

import fetcher, markup
from settings import SiteConfig

_ENCODE_SAFE = "-_.!~*'()"          # same set encodeURIComponent leaves alone


class TransportMode(enum.Enum):
    DIRECT = "direct"
    RELAY = "relay"


class TransportError(Exception):
    """Either backend failed to hand back markup."""

    def __init__(self, message: str, mode: TransportMode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.mode = mode


def is_loopback(host: str) -> bool:
    host = (host or "").strip("[]").lower()
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def resolve_mode(host: str) -> TransportMode:
    """Loopback hosts talk to the companion API, everything else goes through the relay."""
    return TransportMode.DIRECT if is_loopback(host) else TransportMode.RELAY


# ─────────────────────────── transports ───────────────────────────
class Transport:
    mode: TransportMode
    hint: str = ""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    def resolve_search_endpoint(self, query: str) -> str:
        return self.config.live_site.rstrip("/") + "/?s=" + quote(query, safe=_ENCODE_SAFE)

    def resolve_page_endpoint(self, path: str) -> str:
        return self.config.live_site.rstrip("/") + "/" + path.lstrip("/")

    def retrieve(self, url: str) -> str:
        """Finished, embeddable markup for a live-site URL, or TransportError."""
        try:
            return self._retrieve(url)
        except TransportError:
            raise
        except (requests.RequestException, ValueError) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__, self.mode) from exc

    def _retrieve(self, url: str) -> str:
        """Backend-specific fetch; subclasses must override."""
        raise NotImplementedError


class DirectTransport(Transport):
    mode = TransportMode.DIRECT
    hint = "is the companion API running?"

    def api_url(self, url: str) -> str:
        origin = self.config.companion_origin
        if "?s=" in url:
            # query is already percent-encoded by resolve_search_endpoint
            return f"{origin}/api/search?s={url.split('?s=', 1)[1]}"
        path = url.replace(self.config.live_site.rstrip("/"), "", 1)
        return f"{origin}/api/page?path={quote(path, safe=_ENCODE_SAFE)}"

    def _retrieve(self, url: str) -> str:
        data = fetcher.fetch_json(self.api_url(url), timeout=self.config.timeout)
        if not isinstance(data, dict):
            raise TransportError("malformed companion API response", self.mode)
        if not data.get("ok"):
            raise TransportError(data.get("error") or "proxy error", self.mode)
        html = data.get("html")
        if html is None:
            return ""
        if not isinstance(html, str):
            raise TransportError("malformed companion API response", self.mode)
        return html


class RelayTransport(Transport):
    mode = TransportMode.RELAY
    hint = "relay may be down"

    def relay_url(self, url: str) -> str:
        return self.config.relay_base + quote(url, safe=_ENCODE_SAFE)

    def _retrieve(self, url: str) -> str:
        data = fetcher.fetch_json(self.relay_url(url), timeout=self.config.timeout)
        contents = data.get("contents") if isinstance(data, dict) else None
        if not isinstance(contents, str) or not contents:
            raise TransportError("relay returned no contents", self.mode)
        return markup.transform(contents, self.config)


_TRANSPORTS = {
    TransportMode.DIRECT: DirectTransport,
    TransportMode.RELAY: RelayTransport,
}


def make_transport(config: SiteConfig) -> Transport:
    mode = resolve_mode(config.host)
    print(f"[mirror-search] mode: {mode.value} ({config.host or 'no host'})")
    return _TRANSPORTS[mode](config)
