"""Registry enrichment models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from .declared_package import DeclaredPackage

UNAVAILABLE = "N/A"

_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ")


class EnrichmentState(str, Enum):
    """Lifecycle of a registry lookup for one package row."""

    NOT_FETCHED = "not-fetched"
    FETCHING = "fetching"
    FETCHED = "fetched"


@dataclass(frozen=True)
class RegistryInfo:
    """Latest release metadata for a package, or the unavailable sentinel."""

    latest_version: str
    last_published: str

    @classmethod
    def unavailable(cls) -> RegistryInfo:
        return cls(latest_version=UNAVAILABLE, last_published=UNAVAILABLE)

    @property
    def available(self) -> bool:
        return self.latest_version != UNAVAILABLE

    @property
    def published_at(self) -> datetime | None:
        """Return ``last_published`` as an aware datetime, if it parses."""
        if not self.last_published or self.last_published == UNAVAILABLE:
            return None
        for fmt in _TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(self.last_published, fmt)
            except ValueError:
                continue
            return parsed.replace(tzinfo=timezone.utc)
        try:
            parsed = datetime.fromisoformat(self.last_published)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def to_dict(self) -> dict[str, str]:
        return {
            "latestVersion": self.latest_version,
            "lastPublished": self.last_published,
        }


@dataclass(frozen=True)
class EnrichedPackage:
    """A declared package joined with its enrichment status."""

    package: DeclaredPackage
    state: EnrichmentState = EnrichmentState.NOT_FETCHED
    info: RegistryInfo | None = None

    @property
    def latest_version(self) -> str:
        return self.info.latest_version if self.info else UNAVAILABLE

    @property
    def last_published(self) -> str:
        return self.info.last_published if self.info else UNAVAILABLE

    @property
    def loading(self) -> bool:
        return self.state is EnrichmentState.FETCHING

    def to_dict(self) -> dict[str, object]:
        data = self.package.to_dict()
        data["state"] = self.state.value
        if self.info is not None:
            data.update(self.info.to_dict())
        return data
