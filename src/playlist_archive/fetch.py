"""HTTP fetching for archive listings and playlist pages."""
from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable

import requests
import requests_cache
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """A page could not be fetched; aborts the current discovery run."""

    def __init__(self, url: str, status_code: int | None, message: str) -> None:
        super().__init__(f"Failed to fetch {url} (status {status_code}): {message}")
        self.url = url
        self.status_code = status_code


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for HTTP fetches."""

    user_agent: str
    timeout_s: int
    sleep_s: float
    retries_total: int
    retries_backoff: float
    retries_statuses: list[int]
    cache_enabled: bool
    cache_backend: str
    cache_name: str
    cache_expire_after_s: int


def build_session(config: FetchConfig) -> requests.Session:
    """Create a session with retries, cached when enabled."""
    if config.cache_enabled:
        session = requests_cache.CachedSession(
            config.cache_name,
            backend=config.cache_backend,
            expire_after=config.cache_expire_after_s,
        )
    else:
        session = requests.Session()

    retry = Retry(
        total=config.retries_total,
        backoff_factor=config.retries_backoff,
        status_forcelist=config.retries_statuses,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": config.user_agent})
    return session


@dataclass
class FetchResult:
    """Result of a fetch operation."""

    url: str
    status_code: int | None
    text: str | None
    error: str | None


def fetch_url(session: requests.Session, url: str, timeout_s: int) -> FetchResult:
    """Fetch a URL and return response text and status."""
    try:
        response = session.get(url, timeout=timeout_s)
        response.raise_for_status()
        return FetchResult(url=url, status_code=response.status_code, text=response.text, error=None)
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        logger.warning("HTTP error for %s: %s", url, status)
        return FetchResult(url=url, status_code=status, text=None, error=str(exc))
    except requests.RequestException as exc:
        logger.warning("Request error for %s: %s", url, exc)
        return FetchResult(url=url, status_code=None, text=None, error=str(exc))


def fetch_json(session: requests.Session, url: str, params: dict[str, Any], timeout_s: int) -> dict[str, Any]:
    """Fetch a JSON object from a URL, raising FetchError on any failure."""
    try:
        response = session.get(url, params=params, timeout=timeout_s)
        response.raise_for_status()
        payload = response.json()
    except requests.HTTPError as exc:
        status = exc.response.status_code if exc.response is not None else None
        raise FetchError(url, status, str(exc)) from exc
    except (requests.RequestException, ValueError) as exc:
        raise FetchError(url, None, str(exc)) from exc

    if not isinstance(payload, dict):
        raise FetchError(url, response.status_code, "expected a JSON object")
    return payload


def fetch_page(session: requests.Session, url: str, timeout_s: int) -> str:
    """Fetch a page that must exist, raising FetchError otherwise."""
    fetched = fetch_url(session, url, timeout_s=timeout_s)
    if fetched.error:
        raise FetchError(url, fetched.status_code, fetched.error)
    return fetched.text or ""


def make_month_fetcher(
    session: requests.Session,
    archive_url: str,
    timeout_s: int,
    sleep_s: float = 0.0,
) -> Callable[[int, int], str]:
    """Build the ``fetch_month(year, month)`` callable used by discovery.

    ``archive_url`` is a template with ``{yyyy}`` and ``{mm}`` placeholders. A
    404 means the archive has no listing for that month yet and yields an
    empty page; every other failure raises FetchError.
    """

    def fetch_month(year: int, month: int) -> str:
        url = archive_url.format(yyyy=f"{year:04d}", mm=f"{month:02d}", m=month)
        fetched = fetch_url(session, url, timeout_s=timeout_s)
        if sleep_s:
            time.sleep(sleep_s)
        if fetched.status_code == 404:
            logger.info("No archive listing at %s", url)
            return ""
        if fetched.error:
            raise FetchError(url, fetched.status_code, fetched.error)
        return fetched.text or ""

    return fetch_month
