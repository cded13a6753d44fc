from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from puck_savant.config.settings import AppSettings, settings
from puck_savant.models.enums import SourceName


class SourceError(Exception):
    """Base exception for upstream source failures."""

    pass


class SourceUnavailableError(SourceError):
    """Raised for network errors, timeouts and non-2xx responses."""

    pass


class RateLimitError(SourceError):
    """Exception raised for rate limit errors (429)."""

    pass


class SourceParseError(SourceError):
    """Raised when an upstream payload cannot be decoded."""

    pass


def build_http_client(app_settings: Optional[AppSettings] = None) -> httpx.AsyncClient:
    """Creates the HTTP client shared by every source client."""
    app_settings = app_settings or settings
    return httpx.AsyncClient(
        timeout=httpx.Timeout(app_settings.http_timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": app_settings.user_agent,
            "Accept": "application/json,text/csv",
        },
    )


class BaseSourceClient(ABC):
    """Abstract base class for upstream data sources.

    A single request is made per call. Failures are not retried here: the
    source cache serves its last good snapshot and the next request after
    the TTL tries again.
    """

    source: SourceName

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self.settings = app_settings or settings
        self.client = client or build_http_client(self.settings)

    @abstractmethod
    async def fetch(self) -> Any:
        """Fetch and parse the source payload that gets cached."""
        pass

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes an asynchronous HTTP request and maps failures to SourceError."""
        logger.debug(f"{self.source.value}: {method} {url} params={params}")
        try:
            response = await self.client.request(method, url, params=params, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout requesting {url} for {self.source.value}: {e}")
            raise SourceUnavailableError(f"Timeout requesting {url}") from e
        except httpx.RequestError as e:
            logger.warning(f"Request error for {self.source.value} at {url}: {e}")
            raise SourceUnavailableError(f"Request to {url} failed") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(
                f"Rate limit hit (429) for {self.source.value} at {url}. Retry-After: {retry_after}"
            )
            raise RateLimitError(f"Rate limited by {self.source.value}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error during request for {self.source.value}: {e.response.status_code} - {e}"
            )
            raise SourceUnavailableError(
                f"HTTP error: {e.response.status_code}"
            ) from e

        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def _get_json(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        response = await self._make_request("GET", url, params=params)
        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"Raw response content: {response.text[:500]}")
            raise SourceParseError(
                f"{self.source.value} returned invalid JSON from {url}"
            ) from e
