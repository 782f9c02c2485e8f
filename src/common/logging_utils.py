"""Logging helpers shared by the CLI and the HTTP layer.

Provides a single place to configure the root logger plus small utilities for
structured DEBUG traces (extra fields, URL redaction and request timing).
"""
from __future__ import annotations

import logging
import os
import re
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY_KEYS = ("token", "signature", "credential", "secret")
_REDACTED = "[REDACTED]"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger to write to stderr.

    Level resolution order: explicit argument, then the
    RESOLVE_VERSION_LOG_LEVEL environment variable, then WARNING so that
    stdout/stderr stay quiet for buildpack callers.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "WARNING").upper()
    level_value = getattr(logging, level_name, logging.WARNING)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_resolve_version_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    handler._resolve_version_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level_value)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping, dropping fields whose value is None."""
    return {k: v for k, v in fields.items() if v is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def redact(value: str) -> str:
    """Replace a sensitive value with a fixed marker."""
    return _REDACTED if value else value


def safe_url(url: str) -> str:
    """Strip userinfo and redact token-like query parameters from a URL."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.netloc.rsplit("@", 1)[-1]
    query = parts.query
    if query:
        pairs = []
        for name, value in parse_qsl(query, keep_blank_values=True):
            if any(s in name.lower() for s in _SENSITIVE_QUERY_KEYS):
                value = redact(value)
            pairs.append((name, value))
        query = urlencode(pairs, safe="[]")
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


def compact(text: str, limit: int = 200) -> str:
    """Collapse whitespace and truncate text for single-line log messages."""
    flat = re.sub(r"\s+", " ", text or "").strip()
    if len(flat) > limit:
        return flat[:limit] + "..."
    return flat


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds; reads the running clock while still inside the block."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 3)
