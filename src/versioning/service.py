"""Resolution driver binding listing, key parsing and range resolution."""

from __future__ import annotations

import logging
import platform as _platform
from typing import Callable, List, Optional

from constants import Constants
from registry.s3 import ObjectRecord, list_objects
from .keys import collect_releases
from .models import BinaryKind, KeyParseSummary, ReleaseDescriptor, ResolverConfig
from .resolver import resolve

logger = logging.getLogger(__name__)

Lister = Callable[..., List[ObjectRecord]]


def detect_platform(system: Optional[str] = None) -> str:
    """Return the platform identifier for the host (darwin-x64 or linux-x64)."""
    if system is None:
        system = _platform.system()
    if system == "Darwin":
        return Constants.PLATFORM_DARWIN
    return Constants.PLATFORM_LINUX


def _gather(config: ResolverConfig, lister: Lister) -> KeyParseSummary:
    objects = lister(
        config.bucket_name,
        config.binary_kind.value,
        max_pages=config.max_pages,
        strict=config.strict_decode,
    )
    summary = collect_releases((obj.key for obj in objects), config.bucket_name)
    logger.info(
        "Parsed %d %s release(s), skipped %d key(s)",
        len(summary.releases),
        config.binary_kind.value,
        summary.skipped,
    )
    return summary


def resolve_runtime(config: ResolverConfig, lister: Lister = list_objects) -> ReleaseDescriptor:
    """Resolve a runtime release for the configured (or detected) platform."""
    summary = _gather(config, lister)
    target_platform = config.platform_override or detect_platform()

    releases: List[ReleaseDescriptor] = []
    staging: List[ReleaseDescriptor] = []
    for rel in summary.releases:
        if rel.platform != target_platform:
            continue
        if rel.stage == Constants.STAGING_STAGE:
            staging.append(rel)
        else:
            releases.append(rel)

    logger.debug(
        "Platform %s: %d release and %d staging candidate(s)",
        target_platform,
        len(releases),
        len(staging),
    )
    if config.include_staging:
        releases.extend(staging)
    return resolve(releases, config.constraint_expr)


def resolve_package_manager(config: ResolverConfig, lister: Lister = list_objects) -> ReleaseDescriptor:
    """Resolve a package-manager release; no platform or stage filtering applies."""
    summary = _gather(config, lister)
    return resolve(summary.releases, config.constraint_expr)


def resolve_release(config: ResolverConfig, lister: Lister = list_objects) -> ReleaseDescriptor:
    """Dispatch to the resolver matching ``config.binary_kind``."""
    if config.binary_kind is BinaryKind.RUNTIME:
        return resolve_runtime(config, lister)
    return resolve_package_manager(config, lister)
