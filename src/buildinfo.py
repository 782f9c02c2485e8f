"""Flat key/value build-info log.

Entries are appended as ``key=value`` lines; reading back uses the last line
written for each key.
"""

from __future__ import annotations

import logging
import os
import re
import time
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[^=\s]+$")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class BuildInfo:
    """Append-only key/value store backed by a single file."""

    def __init__(self, path: str):
        self.path = path

    def create(self) -> None:
        """Create the backing file (and parent directories) if missing."""
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "a", encoding="utf-8"):
            pass

    def set(self, key: str, value: object) -> None:
        """Append ``key=value``; newlines in the value collapse to spaces."""
        if not isinstance(key, str) or not _KEY_RE.match(key):
            raise ValueError(f"Invalid build-info key: {key!r}")
        text = re.sub(r"[\r\n]+", " ", str(value))
        self.create()
        with open(self.path, "a", encoding="utf-8") as fh:
            fh.write(f"{key}={text}\n")
        logger.debug("build-info %s=%s", key, text)

    def time(self, key: str, start_ms: int, end_ms: Optional[int] = None) -> str:
        """Store the elapsed seconds between two epoch-ms stamps with three decimals."""
        if end_ms is None:
            end_ms = now_ms()
        elapsed = f"{(end_ms - start_ms) / 1000:.3f}"
        self.set(key, elapsed)
        return elapsed

    def _entries(self) -> Dict[str, str]:
        entries: Dict[str, str] = {}
        if not os.path.isfile(self.path):
            return entries
        with open(self.path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.rstrip("\n")
                if "=" not in line:
                    continue
                key, value = line.split("=", 1)
                entries[key] = value
        return entries

    def get(self, key: str) -> Optional[str]:
        """Return the last value written for ``key``, or None."""
        return self._entries().get(key)

    def list(self) -> List[str]:
        """Return ``key=value`` lines sorted by key, last write wins."""
        entries = self._entries()
        return [f"{key}={entries[key]}" for key in sorted(entries)]
