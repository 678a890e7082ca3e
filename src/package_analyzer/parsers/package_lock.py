"""Build a dependency forest from an npm package-lock.json document.

Roots are the top-level ``dependencies`` entries that the root package
(``packages[""]``) declares; each root's classification is copied down to
every entry nested beneath it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..models.declared_package import Classification
from ..models.tree_node import DependencyTreeNode

logger = logging.getLogger(__name__)

LOCKFILE_NAME = "package-lock.json"
DEFAULT_MAX_DEPTH = 256


class LockfileTooDeep(ValueError):
    """Raised when lockfile nesting exceeds the configured depth bound."""


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _build_node(
    name: str,
    info: Mapping[str, Any],
    classification: Classification,
    depth: int,
    max_depth: int,
) -> DependencyTreeNode:
    if depth > max_depth:
        raise LockfileTooDeep(f"Dependency nesting exceeds {max_depth} levels at '{name}'")

    children: list[DependencyTreeNode] = []
    for child_name, child_info in _mapping(info.get("dependencies")).items():
        if not child_name or not isinstance(child_info, Mapping):
            logger.debug("Skipping malformed lockfile entry under %s: %r", name, child_name)
            continue
        children.append(_build_node(child_name, child_info, classification, depth + 1, max_depth))

    return DependencyTreeNode(
        name=name,
        resolved_version=str(info.get("version") or ""),
        classification=classification,
        children=tuple(children),
    )


def build(
    lock_document: Mapping[str, Any], max_depth: int = DEFAULT_MAX_DEPTH
) -> list[DependencyTreeNode]:
    """Return the forest of production roots followed by development roots.

    Declared names missing from the top-level ``dependencies`` map are skipped
    without error.

    Raises:
        LockfileTooDeep: If an entry is nested more than ``max_depth`` levels.
    """
    top_level = _mapping(lock_document.get("dependencies"))
    if not top_level:
        return []

    root_package = _mapping(_mapping(lock_document.get("packages")).get(""))
    declared_prod = _mapping(root_package.get("dependencies"))
    declared_dev = _mapping(root_package.get("devDependencies"))

    forest: list[DependencyTreeNode] = []

    for name, info in top_level.items():
        if name and name in declared_prod and isinstance(info, Mapping):
            forest.append(_build_node(name, info, Classification.PRODUCTION, 1, max_depth))

    for name in declared_dev:
        info = top_level.get(name)
        if name and isinstance(info, Mapping):
            forest.append(_build_node(name, info, Classification.DEVELOPMENT, 1, max_depth))

    logger.debug(
        "Built lockfile forest with %d root(s) from %d top-level entries",
        len(forest),
        len(top_level),
    )
    return forest
