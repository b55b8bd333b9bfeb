"""Data models for constraint transformation and manifest rewriting."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union


class TransformMode(Enum):
    """How a range is collapsed into a dev placeholder."""
    CORE = "core"  # trailing: 8.5.3 -> 8.5.x-dev
    LIGHTNING = "lightning"  # leading: 1.3.0 -> 1.x-dev

    @classmethod
    def from_name(cls, name: str) -> "TransformMode":
        """Look a mode up by value, accepting the trailing/leading aliases."""
        key = name.strip().lower()
        aliases = {"trailing": cls.CORE, "leading": cls.LIGHTNING}
        if key in aliases:
            return aliases[key]
        return cls(key)


# A built-in mode or any callable mapping one range to its dev form.
RangeTransform = Union[TransformMode, Callable[[str], str]]


@dataclass(frozen=True)
class ManifestRule:
    """Selects manifest packages by glob and assigns them a transform mode."""
    pattern: str
    mode: TransformMode


@dataclass
class DevRequirement:
    """A manifest requirement alongside its dev constraint."""
    package: str
    constraint: str
    dev_constraint: str
    mode: TransformMode

    @property
    def changed(self) -> bool:
        """True when the dev constraint differs from the original."""
        return self.dev_constraint != self.constraint

    def as_dependency(self) -> str:
        """Render in ``composer require`` argument form."""
        return f"{self.package}:{self.dev_constraint}"
