# keypad.py - 2026-10-14
"""
Radical keypad: pick a left radical and a right radical, get one character.

The composition table (`key-map.json`, left → right → character) is loaded
once per process. If neither the configured location nor the fixed fallback
can be read, composing quietly stops working and typed input is unaffected.
"""

from __future__ import annotations

import concurrent.futures
import sys
import threading
from typing import Dict, Optional

import requests

import fetcher

Table = Dict[str, Dict[str, str]]


class LoadError(Exception):
    """The composition asset is missing or not a two-level string mapping."""


def _validate(data) -> Table:
    if not isinstance(data, dict):
        raise LoadError("key-map is not an object")
    for outer, inner in data.items():
        if not isinstance(inner, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in inner.items()
        ):
            raise LoadError(f"key-map entry {outer!r} is not a mapping of strings")
    return data


class CompositionTable:
    """absent → loading → loaded (or back to absent after two failed reads)."""

    ABSENT, LOADING, LOADED = "absent", "loading", "loaded"

    def __init__(self) -> None:
        self._data: Optional[Table] = None
        self._lock = threading.Lock()
        self.state = self.ABSENT

    @property
    def loaded(self) -> bool:
        return self.state == self.LOADED

    def _read(self, url: str, timeout: float) -> Table:
        try:
            return _validate(fetcher.fetch_json(url, timeout=timeout))
        except (requests.RequestException, ValueError) as exc:
            raise LoadError(str(exc)) from exc

    def load(self, primary: str, fallback: str, timeout: float = 10) -> bool:
        """One read of `primary`, one retry at `fallback`; never raises."""
        with self._lock:
            self.state = self.LOADING
        try:
            data = self._read(primary, timeout)
            print(f"[keypad] key-map loaded: {len(data)} pages")
        except LoadError as exc:
            print(f"[keypad] failed to load key-map from {primary}: {exc}", file=sys.stderr)
            try:
                data = self._read(fallback, timeout)
                print(f"[keypad] key-map loaded from fallback {fallback}")
            except LoadError as exc2:
                print(f"[keypad] key-map fallback also failed: {exc2}", file=sys.stderr)
                with self._lock:
                    self._data, self.state = None, self.ABSENT
                return False
        with self._lock:
            self._data, self.state = data, self.LOADED
        return True

    def load_async(self, primary: str, fallback: str,
                   timeout: float = 10) -> concurrent.futures.Future:
        """Fire-and-forget load on a worker thread; the future yields load()'s result."""
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        future = pool.submit(self.load, primary, fallback, timeout)
        pool.shutdown(wait=False)
        return future

    def lookup(self, outer: str, inner: str) -> Optional[str]:
        data = self._data
        if data is None:
            return None
        return data.get(outer, {}).get(inner) or None


# process-wide table
TABLE = CompositionTable()


class Keypad:
    """PendingQuery plus the two radical selections."""

    def __init__(self, table: CompositionTable | None = None, value: str = "") -> None:
        self.table = table if table is not None else TABLE
        self.value = value
        self.left: Optional[str] = None
        self.right: Optional[str] = None
        self.submit_enabled = False
        self._refresh()

    def _refresh(self) -> None:
        self.submit_enabled = len(self.value) > 0

    # ---------- selections ----------
    def select_left(self, key: str) -> Optional[str]:
        self.left = key
        return self.merge()

    def select_right(self, key: str) -> Optional[str]:
        self.right = key
        return self.merge()

    def merge(self) -> Optional[str]:
        """Append the composed character and clear both selections, or do nothing."""
        if self.left is None or self.right is None or not self.table.loaded:
            return None
        unit = self.table.lookup(self.left, self.right)
        if unit is None:
            return None
        self.value += unit
        self.left = self.right = None
        self._refresh()
        return unit

    # ---------- editing ----------
    def delete(self) -> None:
        # str slicing is per code point, so a CJK character goes in one step
        self.value = self.value[:-1]
        self._refresh()

    def clear(self) -> None:
        self.value = ""
        self.left = self.right = None
        self._refresh()
