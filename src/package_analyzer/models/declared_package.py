"""Declared package model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Classification(str, Enum):
    """Dependency category a package was declared under."""

    PRODUCTION = "dependency"
    DEVELOPMENT = "devDependency"

    @property
    def section(self) -> str:
        """Return the manifest section name backing this classification."""
        if self is Classification.PRODUCTION:
            return "dependencies"
        return "devDependencies"


@dataclass(frozen=True)
class DeclaredPackage:
    """Represent a package entry extracted from a manifest or lockfile."""

    name: str
    version_constraint: str
    classification: Classification

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if not isinstance(self.classification, Classification):
            raise ValueError(f"Invalid classification: {self.classification!r}")

    @property
    def key(self) -> tuple[str, Classification]:
        return (self.name, self.classification)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.version_constraint,
            "type": self.classification.value,
        }
