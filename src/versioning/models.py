"""Data models for release parsing and version resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

import semantic_version

from constants import Constants


class BinaryKind(Enum):
    """Enum for supported binaries; the value is the CLI name and key prefix."""
    RUNTIME = "node"
    PACKAGE_MANAGER = "yarn"


@dataclass(frozen=True)
class ReleaseDescriptor:
    """A parsed release candidate with its rebuilt download location."""
    binary_kind: BinaryKind
    stage: str
    platform: str  # empty for platform-independent binaries
    version: semantic_version.Version
    download_url: str


@dataclass(frozen=True)
class KeyParseSummary:
    """Outcome of parsing a batch of object keys."""
    releases: Tuple[ReleaseDescriptor, ...]
    skipped: int


@dataclass(frozen=True)
class VersionConstraint:
    """Parsed version-range expression together with its raw text."""
    raw: str
    spec: Union[semantic_version.NpmSpec, semantic_version.SimpleSpec]

    def match(self, version: semantic_version.Version) -> bool:
        """Return True when ``version`` satisfies the constraint."""
        return self.spec.match(version)


@dataclass(frozen=True)
class ResolverConfig:
    """Everything a resolution needs, passed explicitly instead of read from the process."""
    binary_kind: BinaryKind
    constraint_expr: str
    bucket_name: str = Constants.DEFAULT_BUCKET
    platform_override: Optional[str] = None
    include_staging: bool = False
    max_pages: int = Constants.LISTING_MAX_PAGES
    strict_decode: bool = True
