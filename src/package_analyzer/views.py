"""Presentation models for the table and graph views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from collections.abc import Iterable, Sequence

from .models.declared_package import Classification, DeclaredPackage
from .models.enrichment import UNAVAILABLE, EnrichedPackage, EnrichmentState
from .models.tree_node import DependencyTreeNode, count_nodes
from .parsers.semver import is_outdated, satisfies

ROOT_LABEL = "Dependencies"
ROOT_KIND = "root"


class TableFilter(str, Enum):
    """Table tabs: every package, or one classification only."""

    ALL = "all"
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    def accepts(self, classification: Classification) -> bool:
        if self is TableFilter.PRODUCTION:
            return classification is Classification.PRODUCTION
        if self is TableFilter.DEVELOPMENT:
            return classification is Classification.DEVELOPMENT
        return True


@dataclass(frozen=True)
class TableRow:
    """One table line; ``index`` addresses the row for single-item refresh."""

    index: int
    name: str
    current_version: str
    latest_version: str
    last_published: str
    type: str
    state: EnrichmentState
    outdated: bool
    in_range: bool | None

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "name": self.name,
            "currentVersion": self.current_version,
            "latestVersion": self.latest_version,
            "lastPublished": self.last_published,
            "type": self.type,
            "state": self.state.value,
            "outdated": self.outdated,
            "inRange": self.in_range,
        }


def format_published(entry: EnrichedPackage) -> str:
    published = entry.info.published_at if entry.info else None
    if published is None:
        return UNAVAILABLE
    return f"{published:%b} {published.day}, {published.year}"


def _row(index: int, entry: EnrichedPackage, resolved: bool) -> TableRow:
    pkg = entry.package
    latest = entry.latest_version
    in_range = None if resolved else satisfies(latest, pkg.version_constraint)
    return TableRow(
        index=index,
        name=pkg.name,
        current_version=pkg.version_constraint,
        latest_version=latest,
        last_published=format_published(entry),
        type=pkg.classification.value,
        state=entry.state,
        outdated=is_outdated(pkg.version_constraint, latest),
        in_range=in_range,
    )


def table_rows(
    packages: Sequence[EnrichedPackage],
    table_filter: TableFilter = TableFilter.ALL,
    *,
    resolved: bool = False,
) -> list[TableRow]:
    """Return rows for ``packages`` whose classification passes ``table_filter``.

    Row indexes refer to positions in the unfiltered sequence. Pass
    ``resolved=True`` for lockfile rows, whose versions are exact pins; their
    ``in_range`` is always None.
    """
    return [
        _row(index, entry, resolved)
        for index, entry in enumerate(packages)
        if table_filter.accepts(entry.package.classification)
    ]


@dataclass(frozen=True)
class DependencyStats:
    total: int
    production: int
    development: int
    nested: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "dependencies": self.production,
            "devDependencies": self.development,
            "nested": self.nested,
        }


def stats(
    packages: Iterable[DeclaredPackage], forest: Iterable[DependencyTreeNode] = ()
) -> DependencyStats:
    packages = list(packages)
    production = sum(1 for p in packages if p.classification is Classification.PRODUCTION)
    return DependencyStats(
        total=len(packages),
        production=production,
        development=len(packages) - production,
        nested=count_nodes(forest),
    )


@dataclass(frozen=True)
class GraphNode:
    """Graph-view node labelled ``name@version``.

    ``kind`` is the classification value, or ``"root"`` for the synthetic
    container, which the renderer shows without a classification badge.
    """

    name: str
    kind: str
    children: tuple[GraphNode, ...] = ()

    @property
    def is_container(self) -> bool:
        return self.kind == ROOT_KIND

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "attributes": {"type": self.kind},
            "children": [child.to_dict() for child in self.children],
        }


def _graph_node(node: DependencyTreeNode) -> GraphNode:
    return GraphNode(
        name=f"{node.name}@{node.resolved_version}",
        kind=node.classification.value,
        children=tuple(_graph_node(child) for child in node.children),
    )


def graph_tree(forest: Sequence[DependencyTreeNode]) -> GraphNode | None:
    """Return a single-rooted presentation tree, or None for an empty forest.

    A forest with several roots is wrapped in a synthetic container node.
    """
    if not forest:
        return None
    if len(forest) == 1:
        return _graph_node(forest[0])
    return GraphNode(
        name=ROOT_LABEL,
        kind=ROOT_KIND,
        children=tuple(_graph_node(root) for root in forest),
    )
