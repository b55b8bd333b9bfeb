"""Composer manifest support: switch selected requirements to dev constraints."""
from __future__ import annotations

import fnmatch
import json
import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from versioning.constraint import to_dev
from versioning.models import DevRequirement, ManifestRule, TransformMode

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a composer manifest cannot be read or written."""


def default_rules() -> List[ManifestRule]:
    """Rules built from Constants.DEFAULT_MANIFEST_RULES."""
    return build_rules(Constants.DEFAULT_MANIFEST_RULES)


def build_rules(pairs: Iterable[Tuple[str, str]]) -> List[ManifestRule]:
    """Turn (pattern, mode name) pairs into rules.

    Raises:
        ValueError: If a mode name is unknown.
    """
    return [ManifestRule(pattern=pattern, mode=TransformMode.from_name(mode)) for pattern, mode in pairs]


def resolve_manifest_path(path: Optional[str]) -> str:
    """Accept a directory or a file path; directories get composer.json appended."""
    target = path or "."
    if os.path.isdir(target):
        return os.path.join(target, Constants.COMPOSER_JSON_FILE)
    return target


def _read_manifest(path: str) -> Dict:
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} is not a JSON object")
    return data


def load_requirements(path: str) -> Dict[str, str]:
    """Return the ``require`` section of a composer.json, in file order.

    Raises:
        ManifestError: If the file is missing or not a JSON object.
    """
    require = _read_manifest(path).get("require") or {}
    if not isinstance(require, dict):
        raise ManifestError(f"'require' in {path} is not an object")
    return {str(name): str(constraint) for name, constraint in require.items()}


def match_rule(package: str, rules: Sequence[ManifestRule]) -> Optional[ManifestRule]:
    """First rule whose glob matches the package name."""
    for rule in rules:
        if fnmatch.fnmatchcase(package, rule.pattern):
            return rule
    return None


def select_dev_requirements(
    require: Dict[str, str],
    rules: Optional[Sequence[ManifestRule]] = None,
) -> List[DevRequirement]:
    """Compute dev constraints for every requirement a rule selects.

    Requirements matched by no rule are skipped.
    """
    if rules is None:
        rules = default_rules()
    selected = []
    for package, constraint in require.items():
        rule = match_rule(package, rules)
        if rule is None:
            continue
        dev = to_dev(constraint, rule.mode)
        selected.append(
            DevRequirement(package=package, constraint=constraint, dev_constraint=dev, mode=rule.mode)
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Selected requirement",
                extra=extra_context(
                    event="decision",
                    component="composer",
                    action="select_dev_requirements",
                    package=package,
                    mode=rule.mode.value,
                    outcome="changed" if dev != constraint else "unchanged",
                ),
            )
    return selected


def write_dev_requirements(path: str, requirements: Iterable[DevRequirement]) -> int:
    """Rewrite the selected requirements of a manifest in place.

    Other keys and the order of ``require`` are preserved. Output uses four
    space indentation and unescaped slashes like composer itself.

    Returns:
        Number of requirements whose constraint changed.
    """
    data = _read_manifest(path)
    require = data.get("require")
    if not isinstance(require, dict):
        raise ManifestError(f"'require' in {path} is not an object")

    changed = 0
    for req in requirements:
        if req.package in require and require[req.package] != req.dev_constraint:
            require[req.package] = req.dev_constraint
            changed += 1

    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=4, ensure_ascii=False)
            fh.write("\n")
    except OSError as exc:
        raise ManifestError(f"Could not write {path}: {exc}") from exc
    logger.info("Updated %d requirement(s) in %s", changed, path)
    return changed
