"""Error types raised while listing, parsing and resolving releases."""

from __future__ import annotations

from typing import Optional


class ResolveVersionError(Exception):
    """Base class for every failure surfaced by resolve-version."""

    kind = "resolveVersionError"


class ConfigError(ResolveVersionError):
    """Configuration file or option could not be used."""

    kind = "configError"


class NetworkError(ResolveVersionError):
    """Transport or HTTP failure while listing the bucket."""

    kind = "networkError"

    def __init__(self, message: str, url: str = "", status: int = 0):
        super().__init__(message)
        self.url = url
        self.status = status

    def __str__(self) -> str:
        base = super().__str__()
        if self.status:
            return f"HTTP {self.status}: {base} ({self.url})"
        if self.url:
            return f"{base} ({self.url})"
        return base


class DecodeAnomaly(ResolveVersionError):
    """A listing page body could not be decoded."""

    kind = "decodeAnomaly"


class PaginationLimitExceeded(ResolveVersionError):
    """The remote kept reporting truncation past the configured page bound."""

    kind = "paginationLimit"

    def __init__(self, max_pages: int):
        super().__init__(f"Listing did not finish within {max_pages} pages")
        self.max_pages = max_pages


class UnrecognizedFormat(ResolveVersionError):
    """An object key matched no known release naming convention."""

    kind = "unrecognizedFormat"

    def __init__(self, key: str, reason: Optional[str] = None):
        super().__init__(reason or "Failed to parse key")
        self.key = key


class InvalidConstraint(ResolveVersionError):
    """A version-range expression could not be parsed."""

    kind = "invalidConstraint"


class NoMatch(ResolveVersionError):
    """No candidate satisfied the version constraint."""

    kind = "noMatch"

    def __init__(self, message: str = "No matching version"):
        super().__init__(message)
