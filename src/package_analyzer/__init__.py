"""package-analyzer core package.

Parses npm manifests and lockfiles into a flat package list and a dependency
forest, and enriches packages with npm registry metadata.
"""

__all__ = [
    "core",
    "session",
    "views",
]
