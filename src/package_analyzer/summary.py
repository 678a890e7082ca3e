"""Human-readable rendering of the table and tree views."""

from __future__ import annotations

from collections.abc import Sequence

from .views import DependencyStats, GraphNode, TableRow


def render_stats(dep_stats: DependencyStats) -> str:
    lines = [
        "| Metric | Value |",
        "| --- | --- |",
        f"| Total packages | {dep_stats.total} |",
        f"| Dependencies | {dep_stats.production} |",
        f"| Dev dependencies | {dep_stats.development} |",
        f"| Nested dependencies | {dep_stats.nested} |",
    ]
    return "\n".join(lines) + "\n"


def render_table(rows: Sequence[TableRow]) -> str:
    """Return a Markdown table; outdated current versions are marked with ``!``."""
    lines = [
        "| Package | Current | Latest | Last Published | Type |",
        "| --- | --- | --- | --- | --- |",
    ]

    if not rows:
        lines.append("| (no packages) | n/a | n/a | n/a | n/a |")

    for row in rows:
        current = f"{row.current_version} !" if row.outdated else row.current_version
        lines.append(
            f"| {row.name} | {current} | {row.latest_version} | {row.last_published} | {row.type} |"
        )

    return "\n".join(lines) + "\n"


def _tree_lines(node: GraphNode, depth: int, lines: list[str]) -> None:
    label = node.name if node.is_container else f"{node.name} ({node.kind})"
    lines.append(f"{'  ' * depth}- {label}")
    for child in node.children:
        _tree_lines(child, depth + 1, lines)


def render_tree(tree: GraphNode | None) -> str:
    if tree is None:
        return "No dependency data available\n"
    lines: list[str] = []
    _tree_lines(tree, 0, lines)
    return "\n".join(lines) + "\n"


def render_report(
    file_name: str,
    dep_stats: DependencyStats,
    rows: Sequence[TableRow] | None = None,
    tree: GraphNode | None = None,
    show_tree: bool = False,
) -> str:
    """Return a Markdown document with stats plus the requested views."""
    sections = [f"# Package Analyzer: {file_name}", "", render_stats(dep_stats)]
    if rows is not None:
        sections.extend(["## Packages", "", render_table(rows)])
    if show_tree:
        sections.extend(["## Dependency Graph", "", render_tree(tree)])
    return "\n".join(sections)
