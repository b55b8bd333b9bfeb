"""Configuration file loading and runtime overrides for the CLI.

Settings come from Constants defaults, then an optional YAML config file, then
CLI flags (highest precedence). Invalid entries are logged and skipped so a
bad config never stops the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML (or JSON) configuration file.

    Args:
        config_path: Path to the config file, or None.

    Returns:
        Config mapping; empty when no usable file was given.
    """
    if not config_path:
        return {}

    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config: %s", e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s does not contain a mapping; ignoring", config_path)
        return {}
    return data


def _as_positive_int(value: Any, key: str) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer config value %s=%r", key, value)
        return None
    if number <= 0:
        logger.warning("Ignoring non-positive config value %s=%r", key, value)
        return None
    return number


def _parse_rules(raw: Any) -> Optional[List[Tuple[str, str]]]:
    """Validate ``manifest.rules`` entries of the form {pattern, mode}."""
    if not isinstance(raw, list):
        logger.warning("Ignoring manifest.rules: expected a list")
        return None
    rules = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("pattern") or not entry.get("mode"):
            logger.warning("Ignoring manifest rule %r: pattern and mode are required", entry)
            continue
        mode = str(entry["mode"]).strip().lower()
        if mode not in ("core", "lightning", "trailing", "leading"):
            logger.warning("Ignoring manifest rule %r: unknown mode", entry)
            continue
        rules.append((str(entry["pattern"]), mode))
    return rules


def apply_config(config: Dict[str, Any]) -> None:
    """Apply a loaded config mapping onto Constants."""
    release = config.get("release_history") or {}
    if isinstance(release, dict):
        if release.get("url"):
            Constants.RELEASE_HISTORY_URL = str(release["url"]).rstrip("/")
        if release.get("api"):
            Constants.RELEASE_HISTORY_API = str(release["api"])
        if "prefix" in release and release["prefix"] is not None:
            Constants.RELEASE_CHANNEL_PREFIX = str(release["prefix"])

    http = config.get("http") or {}
    if isinstance(http, dict):
        for key, attr in (
            ("timeout", "REQUEST_TIMEOUT"),
            ("retries", "HTTP_RETRY_MAX"),
            ("cache_ttl", "HTTP_CACHE_TTL_SEC"),
        ):
            if key in http:
                value = _as_positive_int(http[key], f"http.{key}")
                if value is not None:
                    setattr(Constants, attr, value)

    manifest = config.get("manifest") or {}
    if isinstance(manifest, dict) and "rules" in manifest:
        rules = _parse_rules(manifest["rules"])
        if rules:
            Constants.DEFAULT_MANIFEST_RULES = rules


def apply_cli_overrides(args) -> None:
    """Apply CLI overrides for release history settings."""
    if getattr(args, "BASE_URL", None):
        Constants.RELEASE_HISTORY_URL = args.BASE_URL.rstrip("/")
    if getattr(args, "API_VERSION", None):
        Constants.RELEASE_HISTORY_API = args.API_VERSION
    if getattr(args, "PREFIX", None) is not None:
        Constants.RELEASE_CHANNEL_PREFIX = args.PREFIX
    if getattr(args, "TIMEOUT", None) is not None:
        Constants.REQUEST_TIMEOUT = int(args.TIMEOUT)
