"""Session state for the currently loaded document.

Parsed records stay immutable; enrichment status is tracked separately,
keyed by row index. Each successful load bumps a generation counter, and
enrichment results computed for an older generation are discarded.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import Settings
from .core import ParseResult, parse
from .models.declared_package import DeclaredPackage
from .models.enrichment import EnrichedPackage, EnrichmentState, RegistryInfo
from .models.tree_node import DependencyTreeNode
from .registry.npm_registry import fetch_all, fetch_latest

logger = logging.getLogger(__name__)

FetchOne = Callable[[str], RegistryInfo]
FetchMany = Callable[[Sequence[str]], Sequence[RegistryInfo]]


class AnalyzerSession:
    """Holds one document's package list, forest and enrichment status."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        fetch_one: FetchOne | None = None,
        fetch_many: FetchMany | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._fetch_one = fetch_one or (lambda name: fetch_latest(name, self.settings))
        self._fetch_many = fetch_many or (lambda names: fetch_all(names, self.settings))
        self._lock = threading.Lock()
        self._generation = 0
        self._file_name: str | None = None
        self._result = ParseResult()
        self._states: dict[int, EnrichmentState] = {}
        self._infos: dict[int, RegistryInfo] = {}

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def file_name(self) -> str | None:
        return self._file_name

    @property
    def declared(self) -> tuple[DeclaredPackage, ...]:
        return self._result.packages

    @property
    def forest(self) -> tuple[DependencyTreeNode, ...]:
        return self._result.forest

    @property
    def is_lockfile(self) -> bool:
        return self._result.is_lockfile

    def load(self, document_text: str, file_identifier: str) -> ParseResult:
        """Replace the current document with a newly parsed one.

        Raises:
            MalformedInput: The previous document stays in place.
        """
        result = parse(document_text, file_identifier, max_depth=self.settings.max_depth)
        with self._lock:
            self._result = result
            self._file_name = Path(file_identifier).name
            self._states = {}
            self._infos = {}
            self._generation += 1
        logger.info(
            "Loaded %s: %d packages, %d tree roots",
            self._file_name,
            len(result.packages),
            len(result.forest),
        )
        return result

    def load_path(self, path: Path | str) -> ParseResult:
        path = Path(path)
        return self.load(path.read_text(encoding="utf-8"), path.name)

    def clear(self) -> None:
        with self._lock:
            self._result = ParseResult()
            self._file_name = None
            self._states = {}
            self._infos = {}
            self._generation += 1

    def _enriched(self, index: int) -> EnrichedPackage:
        return EnrichedPackage(
            package=self._result.packages[index],
            state=self._states.get(index, EnrichmentState.NOT_FETCHED),
            info=self._infos.get(index),
        )

    def packages(self) -> list[EnrichedPackage]:
        """Return a snapshot of every row joined with its enrichment status.

        Rows are unfiltered so list positions stay valid ``refresh_one``
        indexes; ``views.table_rows`` applies the classification filter.
        """
        with self._lock:
            return [self._enriched(i) for i in range(len(self._result.packages))]

    def package(self, index: int) -> EnrichedPackage:
        with self._lock:
            return self._enriched(index)

    def refresh_one(self, index: int) -> EnrichedPackage | None:
        """Enrich a single row; return the updated row, or None if discarded.

        Raises:
            IndexError: If ``index`` is not a row of the current document.
        """
        with self._lock:
            name = self._result.packages[index].name
            generation = self._generation
            previous_state = self._states.get(index)
            self._states[index] = EnrichmentState.FETCHING

        try:
            info = self._fetch_one(name)
        except Exception:
            with self._lock:
                if generation == self._generation:
                    if previous_state is None:
                        self._states.pop(index, None)
                    else:
                        self._states[index] = previous_state
            raise

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale result for %s (generation %d)", name, generation)
                return None
            self._infos[index] = info
            self._states[index] = EnrichmentState.FETCHED
            return self._enriched(index)

    def refresh_all(self) -> bool:
        """Enrich every row and apply all results in a single update.

        Returns False when the document was replaced before the lookups
        finished and the results were discarded.
        """
        with self._lock:
            names = [pkg.name for pkg in self._result.packages]
            generation = self._generation
            previous_states = dict(self._states)
            self._states = {i: EnrichmentState.FETCHING for i in range(len(names))}

        try:
            infos = list(self._fetch_many(names))
            if len(infos) != len(names):
                raise RuntimeError(f"Expected {len(names)} registry results, got {len(infos)}")
        except Exception:
            with self._lock:
                if generation == self._generation:
                    self._states = previous_states
            raise

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale bulk result (generation %d)", generation)
                return False
            self._infos = dict(enumerate(infos))
            self._states = {i: EnrichmentState.FETCHED for i in range(len(names))}
        logger.info("Fetched registry info for %d packages", len(names))
        return True
