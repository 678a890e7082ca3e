"""Parse package.json and extract direct dependencies by classification."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models.declared_package import Classification, DeclaredPackage


def parse(data: Mapping[str, Any]) -> list[DeclaredPackage]:
    """Return declared packages from ``dependencies`` then ``devDependencies``.

    Entries keep their declaration order; a missing or non-object section
    contributes nothing.
    """
    packages: list[DeclaredPackage] = []
    for classification in (Classification.PRODUCTION, Classification.DEVELOPMENT):
        deps = data.get(classification.section) or {}
        if not isinstance(deps, Mapping):
            continue
        for name, version in deps.items():
            if not name:
                continue
            packages.append(
                DeclaredPackage(
                    name=str(name),
                    version_constraint=str(version),
                    classification=classification,
                )
            )

    return packages
