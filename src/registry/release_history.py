"""Release history client: published versions of a project and dev-range lookups."""
from __future__ import annotations

import json
import logging
import re
import urllib.parse
from typing import Any, Iterable, List, Optional
from xml.etree import ElementTree as ET

from constants import Constants
from common import http_client
from common.logging_utils import extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)

_DEV_RANGE_SUFFIX = "." + Constants.DEV_SUFFIX


class ReleaseHistoryError(Exception):
    """Raised when a release history feed cannot be fetched or parsed."""


def parse_release_versions(body: str) -> List[str]:
    """Extract version strings from a release history document.

    Accepts the XML feed (``project/releases/release/version``) or a JSON
    equivalent, either ``{"releases": [{"version": ...}]}`` or a bare list of
    release objects or strings. Feed order is preserved.

    Raises:
        ReleaseHistoryError: If the body is neither valid XML nor JSON.
    """
    text = (body or "").strip()
    if not text:
        raise ReleaseHistoryError("Empty release history document")

    if text[0] in "[{":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ReleaseHistoryError(f"Invalid JSON release history: {exc}") from exc
        return _versions_from_json(data)

    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ReleaseHistoryError(f"Invalid XML release history: {exc}") from exc
    versions = []
    for node in root.findall("./releases/release/version"):
        if node.text and node.text.strip():
            versions.append(node.text.strip())
    return versions


def _versions_from_json(data: Any) -> List[str]:
    """Pull versions out of a decoded JSON feed."""
    releases = data.get("releases", []) if isinstance(data, dict) else data
    if isinstance(releases, dict):
        # {"releases": {"release": [...]}} mirrors the XML nesting.
        releases = releases.get("release", [])
    if not isinstance(releases, list):
        raise ReleaseHistoryError("Unexpected JSON release history structure")
    versions = []
    for release in releases:
        version = release.get("version") if isinstance(release, dict) else release
        if isinstance(version, str) and version.strip():
            versions.append(version.strip())
    return versions


def is_stable(version: str) -> bool:
    """True when a version carries none of the pre-release markers."""
    lowered = version.lower()
    return not any(re.search(rf"{marker}\d*$", lowered) for marker in Constants.UNSTABLE_MARKERS)


def strip_dev_suffix(dev_range: str) -> str:
    """'3.x-dev' gives '3'; anything else is returned unchanged."""
    if dev_range.endswith(_DEV_RANGE_SUFFIX):
        return dev_range[:-len(_DEV_RANGE_SUFFIX)]
    return dev_range


def find_latest(
    versions: Iterable[str],
    dev_range: str,
    prefix: str = Constants.RELEASE_CHANNEL_PREFIX,
    stable_only: bool = True,
) -> Optional[str]:
    """Return the first version of a newest-first feed within a dev range.

    The release channel prefix (e.g. '8.x-') is removed from each version
    before comparing, and the returned version is the unprefixed one. A
    version matches when it equals the range or continues it with a dot, so
    '8.5.x-dev' matches '8.5.8' but not '8.50.1'.

    Returns:
        The matching version, or None when nothing in the feed matches.
    """
    wanted = strip_dev_suffix(dev_range.strip())
    if not wanted:
        return None
    for version in versions:
        if prefix and version.startswith(prefix):
            version = version[len(prefix):]
        if stable_only and not is_stable(version):
            continue
        if version == wanted or version.startswith(wanted + "."):
            return version
    return None


class ReleaseHistoryClient:
    """Fetches release history feeds and answers latest-release queries."""

    def __init__(
        self,
        base_url: str = Constants.RELEASE_HISTORY_URL,
        api_version: str = Constants.RELEASE_HISTORY_API,
        prefix: str = Constants.RELEASE_CHANNEL_PREFIX,
    ):
        """Initialize the client.

        Args:
            base_url: Feed root, the project name and API version are appended.
            api_version: Core API version segment of the feed URL (e.g. '8.x').
            prefix: Release channel prefix stripped from published versions.
        """
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.prefix = prefix

    def release_history_url(self, name: str) -> str:
        """Feed URL for a project."""
        quoted = urllib.parse.quote(name, safe="")
        return f"{self.base_url}/{quoted}/{self.api_version}"

    def fetch_versions(self, name: str) -> List[str]:
        """Fetch a project's published versions, newest first.

        Raises:
            ReleaseHistoryError: On a non-200 response or an unparsable feed.
        """
        url = self.release_history_url(name)
        status_code, _, body = http_client.robust_get(
            url, headers={"Accept": "application/xml, application/json"}
        )
        if status_code != 200:
            logger.error(
                "Release history for %s unavailable (status %s)",
                name,
                status_code,
                extra=extra_context(
                    event="http_error",
                    component="release_history",
                    action="fetch_versions",
                    status_code=status_code,
                    target=safe_url(url),
                ),
            )
            raise ReleaseHistoryError(f"Release history for {name} returned status {status_code}")

        versions = parse_release_versions(body)
        if is_debug_enabled(logger):
            logger.debug(
                "Parsed release history",
                extra=extra_context(
                    event="parse",
                    component="release_history",
                    action="fetch_versions",
                    outcome="success",
                    count=len(versions),
                    target=safe_url(url),
                ),
            )
        return versions

    def get_latest_stable_release(self, name: str, dev_range: str, stable_only: bool = True) -> Optional[str]:
        """Latest published release of ``name`` within ``dev_range``.

        For example ('lightning_core', '3.x-dev') may give '3.2'. None means
        no published version matched.
        """
        versions = self.fetch_versions(name)
        latest = find_latest(versions, dev_range, prefix=self.prefix, stable_only=stable_only)
        if latest is None:
            logger.info("No release of %s matches %s", name, dev_range)
        else:
            logger.debug("Latest release of %s for %s: %s", name, dev_range, latest)
        return latest
