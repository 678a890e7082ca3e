"""Data models for the package analyzer."""

from __future__ import annotations

from .declared_package import Classification, DeclaredPackage
from .enrichment import UNAVAILABLE, EnrichedPackage, EnrichmentState, RegistryInfo
from .tree_node import DependencyTreeNode, count_nodes, flatten

__all__ = [
    "Classification",
    "DeclaredPackage",
    "DependencyTreeNode",
    "EnrichedPackage",
    "EnrichmentState",
    "RegistryInfo",
    "UNAVAILABLE",
    "count_nodes",
    "flatten",
]
