"""Registry lookups used to enrich declared packages."""

from .npm_registry import (
    EnrichmentUnavailable,
    fetch_all,
    fetch_latest,
    fetch_packument,
    package_url,
)

__all__ = [
    "EnrichmentUnavailable",
    "fetch_all",
    "fetch_latest",
    "fetch_packument",
    "package_url",
]
