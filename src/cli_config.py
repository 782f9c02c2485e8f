"""Configuration loading for the resolve-version CLI.

Merges, in increasing precedence: Constants defaults, the optional YAML/JSON
config file, and CLI flags, producing a ResolverConfig.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from errors import ConfigError
from versioning.models import BinaryKind, ResolverConfig

logger = logging.getLogger(__name__)

_KNOWN_KEYS = ("bucket", "platform", "include_staging", "max_pages", "lenient_decode")


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load settings from a YAML or JSON file.

    A top-level ``resolve_version`` section is used when present, otherwise
    the whole document. Unknown keys are dropped with a warning.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{Constants.CONFIG_SECTION}' section must be a mapping")

    settings = {}
    for key, value in section.items():
        if key in _KNOWN_KEYS:
            settings[key] = value
        else:
            logger.warning("Ignoring unknown config key: %s", key)
    return settings


def _pick(cli_value: Any, file_settings: Dict[str, Any], key: str, default: Any) -> Any:
    if cli_value is not None:
        return cli_value
    if file_settings.get(key) is not None:
        return file_settings[key]
    return default


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"Config value '{key}' must be true or false")


def build_config(args, binary_kind: BinaryKind) -> ResolverConfig:
    """Combine parsed CLI args and the config file into a ResolverConfig.

    Raises:
        ConfigError: On unusable config values.
    """
    file_settings = load_config_file(getattr(args, "CONFIG", None))

    max_pages = _pick(getattr(args, "MAX_PAGES", None), file_settings, "max_pages",
                      Constants.LISTING_MAX_PAGES)
    if isinstance(max_pages, bool) or not isinstance(max_pages, int) or max_pages < 1:
        raise ConfigError("max_pages must be a positive integer")

    include_staging = _as_bool(
        _pick(getattr(args, "INCLUDE_STAGING", None), file_settings, "include_staging", False),
        "include_staging",
    )
    lenient_decode = _as_bool(
        _pick(getattr(args, "LENIENT_DECODE", None), file_settings, "lenient_decode", False),
        "lenient_decode",
    )

    return ResolverConfig(
        binary_kind=binary_kind,
        constraint_expr=args.REQUIREMENT,
        bucket_name=str(_pick(getattr(args, "BUCKET", None), file_settings, "bucket",
                              Constants.DEFAULT_BUCKET)),
        platform_override=_pick(getattr(args, "PLATFORM", None), file_settings, "platform", None),
        include_staging=include_staging,
        max_pages=max_pages,
        strict_decode=not lenient_decode,
    )
