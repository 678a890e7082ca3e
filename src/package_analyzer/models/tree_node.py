"""Dependency tree node model."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Iterable, Iterator

from .declared_package import Classification, DeclaredPackage


@dataclass(frozen=True)
class DependencyTreeNode:
    """A resolved lockfile entry and the entries nested beneath it.

    The same package name may occur at several depths of a forest; nodes are
    never merged across paths.
    """

    name: str
    resolved_version: str
    classification: Classification
    children: tuple[DependencyTreeNode, ...] = ()

    def walk(self) -> Iterator[DependencyTreeNode]:
        """Yield this node and its descendants, parents before children."""
        stack: list[DependencyTreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count(self) -> int:
        """Return the number of nodes in this subtree, including itself."""
        return sum(1 for _ in self.walk())

    def as_declared(self) -> DeclaredPackage:
        return DeclaredPackage(
            name=self.name,
            version_constraint=self.resolved_version,
            classification=self.classification,
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "version": self.resolved_version,
            "type": self.classification.value,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def flatten(forest: Iterable[DependencyTreeNode]) -> list[DeclaredPackage]:
    """Return the pre-order traversal of ``forest`` as declared packages."""
    return [node.as_declared() for root in forest for node in root.walk()]


def count_nodes(forest: Iterable[DependencyTreeNode]) -> int:
    return sum(root.count() for root in forest)
