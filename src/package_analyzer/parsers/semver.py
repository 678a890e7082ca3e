"""Version comparison helpers for declared npm constraints.

``is_outdated`` compares a declared constraint against the latest registry
release using semantic-version precedence. ``satisfies`` checks a release
against an npm range expression (``^``, ``~``, ``x`` ranges, hyphen ranges,
comparator sets and ``||`` unions) through ``semantic_version.NpmSpec``.
"""

from __future__ import annotations

import re

import semantic_version

from ..models.enrichment import UNAVAILABLE

_LEADING_NON_NUMERIC = re.compile(r"^[^0-9]*")


def strip_prefix(constraint: str) -> str:
    """Drop range operators and other leading non-digits (``^``, ``~``, ``>=``, ``v``)."""
    return _LEADING_NON_NUMERIC.sub("", constraint.strip())


def _semver(value: str) -> semantic_version.Version | None:
    try:
        return semantic_version.Version(value)
    except ValueError:
        return None


def is_outdated(current_constraint: str, latest_version: str) -> bool:
    """Return True when the declared version is strictly older than ``latest_version``.

    Never flags a package when the latest version is unknown or either side
    fails to parse as a semantic version.
    """
    if not latest_version or latest_version == UNAVAILABLE:
        return False

    current = _semver(strip_prefix(current_constraint))
    latest = _semver(latest_version.strip())
    if current is None or latest is None:
        return False
    return current < latest


def satisfies(version: str, expr: str) -> bool | None:
    """Return whether ``version`` falls inside the npm range ``expr``.

    Returns None when the answer is unknown: the version is missing or the
    sentinel, or either side does not parse. Pre-releases only match a range
    that names a pre-release of the same major.minor.patch, as npm does.
    """
    expr = expr.strip()
    if not expr or not version or version == UNAVAILABLE:
        return None

    candidate = _semver(version.strip())
    if candidate is None:
        return None
    try:
        spec = semantic_version.NpmSpec(expr)
    except ValueError:
        return None
    return spec.match(candidate)
