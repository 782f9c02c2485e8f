"""Object key parsing into release descriptors.

Keys follow two naming conventions inside the bucket:

- runtime: ``node/<stage>/<platform>/node-v<x.y.z>-<platform><suffix>.tar.gz``
- package manager: ``yarn/<stage>/yarn-v<x.y.z>.tar.gz``

Download URLs are rebuilt from the captured fields rather than taken from the
key, so any extra suffix on a runtime key does not leak into the URL.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

import semantic_version

from constants import Constants
from errors import UnrecognizedFormat
from .models import BinaryKind, KeyParseSummary, ReleaseDescriptor

logger = logging.getLogger(__name__)

_RUNTIME = BinaryKind.RUNTIME.value
_PACKAGE_MANAGER = BinaryKind.PACKAGE_MANAGER.value

RUNTIME_KEY_PATTERN = re.compile(
    rf"{_RUNTIME}/([^/]+)/([^/]+)/{_RUNTIME}-v([0-9]+\.[0-9]+\.[0-9]+)-([^.]*)(.*)\.tar\.gz"
)
PACKAGE_MANAGER_KEY_PATTERN = re.compile(
    rf"{_PACKAGE_MANAGER}/([^/]+)/{_PACKAGE_MANAGER}-v([0-9]+\.[0-9]+\.[0-9]+)\.tar\.gz"
)


def _parse_version(key: str, raw: str) -> semantic_version.Version:
    # Strict semver: leading zeros (``018.1.0``) are rejected, not coerced.
    try:
        return semantic_version.Version(raw)
    except ValueError as exc:
        raise UnrecognizedFormat(key, "Failed to parse version as semver") from exc


def parse_key(key: str, bucket_name: str = Constants.DEFAULT_BUCKET) -> ReleaseDescriptor:
    """Parse an object key into a ReleaseDescriptor.

    Args:
        key: Full object key as listed.
        bucket_name: Bucket used to rebuild the download URL.

    Returns:
        The parsed descriptor.

    Raises:
        UnrecognizedFormat: If the key matches neither convention or its
            version is not valid semver.
    """
    match = RUNTIME_KEY_PATTERN.fullmatch(key)
    if match:
        stage, platform, raw_version = match.group(1), match.group(2), match.group(3)
        version = _parse_version(key, raw_version)
        return ReleaseDescriptor(
            binary_kind=BinaryKind.RUNTIME,
            stage=stage,
            platform=platform,
            version=version,
            download_url=Constants.RUNTIME_URL_TEMPLATE.format(
                bucket=bucket_name,
                name=_RUNTIME,
                stage=stage,
                platform=platform,
                version=raw_version,
            ),
        )

    match = PACKAGE_MANAGER_KEY_PATTERN.fullmatch(key)
    if match:
        version = _parse_version(key, match.group(2))
        return ReleaseDescriptor(
            binary_kind=BinaryKind.PACKAGE_MANAGER,
            stage=match.group(1),
            platform="",
            version=version,
            download_url=Constants.PACKAGE_MANAGER_URL_TEMPLATE.format(
                bucket=bucket_name,
                name=_PACKAGE_MANAGER,
                version=version,
            ),
        )

    raise UnrecognizedFormat(key)


def collect_releases(keys: Iterable[str], bucket_name: str = Constants.DEFAULT_BUCKET) -> KeyParseSummary:
    """Parse many keys, keeping successes in input order and counting skips."""
    releases: List[ReleaseDescriptor] = []
    skipped = 0
    for key in keys:
        try:
            releases.append(parse_key(key, bucket_name))
        except UnrecognizedFormat as exc:
            skipped += 1
            logger.debug("Skipping key %s: %s", exc.key, exc)

    if skipped:
        logger.info("Skipped %d key(s) that are not release archives", skipped)
    return KeyParseSummary(releases=tuple(releases), skipped=skipped)
