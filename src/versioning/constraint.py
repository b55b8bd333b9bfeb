"""Composer constraint tokenizing and dev-branch rewriting.

A constraint such as ``^1.3.0 || ~2.3.0`` is split into range tokens; each
token is collapsed into a dev placeholder (``1.x-dev``) while the separators
between tokens are copied through untouched.
"""

import re
from typing import Dict, List

from constants import Constants
from .models import RangeTransform, TransformMode

_RANGE_RE = re.compile(f"[{Constants.RANGE_CHARS}]+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.]+")
# At least three groups; the last one is the one that gets replaced.
_CORE_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)+)\.[0-9]+$")
_LIGHTNING_RE = re.compile(r"^([0-9]+)\..*$")


def extract_ranges(constraint: str) -> List[str]:
    """Return the range tokens of a constraint, left to right.

    For example '^2.8 || ^3.0' gives ['^2.8', '^3.0']. Duplicates are kept.
    """
    return _RANGE_RE.findall(constraint or "")


def numeric_part(range_: str) -> str:
    """Drop everything except digits and dots, operators and suffixes included."""
    return _NON_NUMERIC_RE.sub("", range_)


def core_range_to_dev(range_: str) -> str:
    """Replace the last digit group of a range with 'x-dev'.

    '^8.5.3' gives '8.5.x-dev'. A range with fewer than three groups has no
    trailing group to replace and comes back as its numeric part ('^8.5' gives
    '8.5').
    """
    numeric = numeric_part(range_)
    match = _CORE_RE.match(numeric)
    if not match:
        return numeric
    return f"{match.group(1)}.{Constants.DEV_SUFFIX}"


def lightning_range_to_dev(range_: str) -> str:
    """Keep only the first digit group of a range and append 'x-dev'.

    '^1.3.0' gives '1.x-dev'. Without any dot the numeric part is returned.
    """
    numeric = numeric_part(range_)
    match = _LIGHTNING_RE.match(numeric)
    if not match:
        return numeric
    return f"{match.group(1)}.{Constants.DEV_SUFFIX}"


_MODE_FUNCS = {
    TransformMode.CORE: core_range_to_dev,
    TransformMode.LIGHTNING: lightning_range_to_dev,
}


def range_to_dev(range_: str, mode: RangeTransform) -> str:
    """Transform one range with a built-in mode or a custom callable."""
    if isinstance(mode, TransformMode):
        return _MODE_FUNCS[mode](range_)
    return mode(range_)


def _token_to_dev(token: str, mode: RangeTransform) -> str:
    """Dev form of a token as it should appear in the rewritten constraint.

    Built-in modes leave a token verbatim when they could not produce a dev
    placeholder for it, so malformed or already-converted ranges survive.
    """
    dev = range_to_dev(token, mode)
    if isinstance(mode, TransformMode) and not dev.endswith(Constants.DEV_SUFFIX):
        return token
    return dev


def to_dev(constraint: str, mode: RangeTransform) -> str:
    """Rewrite every range of a constraint into its dev form.

    Tokens are replaced by position, so text produced for one range is never
    matched again for a later one: '8.5.3 || 8.5' gives '8.5.x-dev || 8.5'
    in core mode.
    """
    if not constraint:
        return constraint
    converted: Dict[str, str] = {}
    for token in extract_ranges(constraint):
        if token not in converted:
            converted[token] = _token_to_dev(token, mode)
    return _RANGE_RE.sub(lambda m: converted[m.group(0)], constraint)


class ComposerConstraint:
    """Operations on a single raw composer constraint."""

    def __init__(self, constraint: str):
        self._constraint = constraint

    def __repr__(self) -> str:
        return f"ComposerConstraint({self._constraint!r})"

    def __str__(self) -> str:
        return self._constraint

    @property
    def raw(self) -> str:
        """The constraint as given."""
        return self._constraint

    @property
    def ranges(self) -> List[str]:
        """Range tokens of the constraint."""
        return extract_ranges(self._constraint)

    def dev(self, mode: RangeTransform) -> str:
        """Dev version of the constraint for the given mode."""
        return to_dev(self._constraint, mode)

    def core_dev(self) -> str:
        """'8.4.3 || ^8.5.3' gives '8.4.x-dev || 8.5.x-dev'."""
        return self.dev(TransformMode.CORE)

    def lightning_dev(self) -> str:
        """'^1.3.0 || ^2.3.0' gives '1.x-dev || 2.x-dev'."""
        return self.dev(TransformMode.LIGHTNING)
