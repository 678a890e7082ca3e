"""Core parsing entrypoint.

This module performs no I/O so it can be shared by the CLI, the session layer
and tests alike.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import PurePath

from .models.declared_package import DeclaredPackage
from .models.tree_node import DependencyTreeNode, flatten
from .parsers.package_json import parse as parse_package_json
from .parsers.package_lock import (
    DEFAULT_MAX_DEPTH,
    LOCKFILE_NAME,
    LockfileTooDeep,
    build as build_lock_forest,
)

logger = logging.getLogger(__name__)


class MalformedInput(ValueError):
    """Raised when an uploaded document is not a usable JSON object."""


@dataclass(frozen=True)
class ParseResult:
    """Flat package list and dependency forest derived from one document."""

    packages: tuple[DeclaredPackage, ...] = ()
    forest: tuple[DependencyTreeNode, ...] = ()
    is_lockfile: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "lockfile": self.is_lockfile,
            "packages": [pkg.to_dict() for pkg in self.packages],
            "tree": [node.to_dict() for node in self.forest],
        }


def is_lockfile(file_identifier: str) -> bool:
    """Return True when the file's basename is exactly ``package-lock.json``."""
    return PurePath(file_identifier).name == LOCKFILE_NAME


def parse(
    document_text: str,
    file_identifier: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ParseResult:
    """Parse a manifest or lockfile into a flat list and a forest.

    Params:
        document_text: raw JSON text of the uploaded file
        file_identifier: file name or path; only the basename is inspected
        max_depth: nesting bound for lockfile trees

    Raises:
        MalformedInput: if the text is not a JSON object or nests too deeply.
    """
    try:
        data = json.loads(document_text)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise MalformedInput(f"{file_identifier}: invalid JSON ({exc})") from exc

    if not isinstance(data, dict):
        raise MalformedInput(f"{file_identifier}: expected a JSON object at the top level")

    if is_lockfile(file_identifier):
        try:
            forest = build_lock_forest(data, max_depth=max_depth)
        except LockfileTooDeep as exc:
            raise MalformedInput(f"{file_identifier}: {exc}") from exc
        packages = flatten(forest)
        logger.debug("Parsed lockfile %s: %d packages", file_identifier, len(packages))
        return ParseResult(packages=tuple(packages), forest=tuple(forest), is_lockfile=True)

    packages = parse_package_json(data)
    logger.debug("Parsed manifest %s: %d packages", file_identifier, len(packages))
    return ParseResult(packages=tuple(packages))
