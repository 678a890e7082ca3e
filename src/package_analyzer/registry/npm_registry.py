"""npm registry lookups for latest version and last publish time.

Every failure mode (network error, non-200 status, undecodable body, missing
fields) is absorbed here and reported as the ``N/A`` sentinel so callers never
see a network-related exception.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

import requests
from requests import Response
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..config import Settings
from ..models.enrichment import RegistryInfo

logger = logging.getLogger(__name__)


class EnrichmentUnavailable(RuntimeError):
    """Raised when registry metadata for a package cannot be obtained."""


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_fixed(1),
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
)
def _http_get(
    session: requests.Session, url: str, *, headers: dict[str, str], timeout: float
) -> Response:
    return session.get(url, headers=headers, timeout=timeout)


def package_url(name: str, registry_url: str) -> str:
    """Return the packument URL; scoped names keep ``@`` and encode the ``/``."""
    return f"{registry_url}{quote(name, safe='@')}"


def _get(session: requests.Session, url: str, settings: Settings) -> Response:
    getter = _http_get.retry_with(
        stop=stop_after_attempt(settings.retry_attempts),
        wait=wait_fixed(settings.retry_wait),
    )
    return getter(
        session,
        url,
        headers={"Accept": "application/json", "User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
    )


def fetch_packument(
    name: str, settings: Settings, session: requests.Session
) -> dict[str, Any]:
    """Return the registry document for ``name``, fetched over ``session``.

    Raises:
        EnrichmentUnavailable: On network failure, non-200 status or bad JSON.
    """
    url = package_url(name, settings.registry_url)
    try:
        response = _get(session, url, settings)
    except requests.RequestException as exc:
        raise EnrichmentUnavailable(f"Failed to fetch {name}: {exc}") from exc

    if response.status_code != 200:
        raise EnrichmentUnavailable(
            f"Unexpected status code {response.status_code} fetching {name}"
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise EnrichmentUnavailable(f"Registry returned invalid JSON for {name}") from exc

    if not isinstance(data, dict):
        raise EnrichmentUnavailable(f"Registry returned unexpected payload for {name}")
    return data


def _extract_info(name: str, packument: dict[str, Any]) -> RegistryInfo:
    dist_tags = packument.get("dist-tags") or {}
    times = packument.get("time") or {}
    latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    modified = times.get("modified") if isinstance(times, dict) else None
    if not isinstance(latest, str) or not isinstance(modified, str):
        raise EnrichmentUnavailable(f"Registry metadata for {name} lacks latest tag or time")
    return RegistryInfo(latest_version=latest, last_published=modified)


def fetch_latest(
    name: str,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> RegistryInfo:
    """Return the latest version and last-modified time for ``name``.

    Without ``session`` a short-lived one is opened for this lookup. Falls
    back to ``RegistryInfo.unavailable()`` on any failure.
    """
    settings = settings or Settings()
    if session is None:
        with requests.Session() as own_session:
            return fetch_latest(name, settings, own_session)
    try:
        return _extract_info(name, fetch_packument(name, settings, session))
    except EnrichmentUnavailable as exc:
        logger.warning("Error fetching info for %s: %s", name, exc)
        return RegistryInfo.unavailable()


def _fetch_isolated(name: str, settings: Settings, session: requests.Session) -> RegistryInfo:
    try:
        return fetch_latest(name, settings, session)
    except Exception:
        logger.exception("Unexpected error fetching info for %s", name)
        return RegistryInfo.unavailable()


def fetch_all(names: Iterable[str], settings: Settings | None = None) -> list[RegistryInfo]:
    """Fetch registry info for every name concurrently, preserving input order.

    Waits for all lookups to settle; one failed lookup yields the sentinel for
    that position only. All lookups share one ``requests.Session``.
    """
    settings = settings or Settings()
    names = list(names)
    if not names:
        return []

    workers = min(settings.max_workers, len(names))
    with requests.Session() as session, ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda name: _fetch_isolated(name, settings, session), names))
