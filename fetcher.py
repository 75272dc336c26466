#fetcher.py
from __future__ import annotations
import requests, random
from typing import Any

_UA_POOL = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_5) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    "Mozilla/5.0 (Macintosh; arm64; Mac OS X 14_0) AppleWebKit/605.1.15 (KHTML, like Gecko)",
]

def _ua() -> str:
    return random.choice(_UA_POOL)

def fetch_json(url: str, timeout: float = 10) -> Any:
    """GET `url` and decode the JSON body; non-JSON error pages raise their HTTP status."""
    print(f"FETCH {url}")
    r = requests.get(url, headers={"User-Agent": _ua(), "Accept": "application/json"},
                     timeout=timeout)
    try:
        return r.json()
    except ValueError:
        r.raise_for_status()
        raise

def page_exists(url: str, timeout: float = 5) -> bool:
    """HEAD probe: True only for a 2xx answer, every failure counts as absent."""
    print(f"HEAD  {url}")
    try:
        r = requests.head(url, headers={"User-Agent": _ua()}, timeout=timeout,
                          allow_redirects=True)
    except requests.RequestException as exc:
        print(f"  ↳ error: {exc}")
        return False
    return 200 <= r.status_code < 300
