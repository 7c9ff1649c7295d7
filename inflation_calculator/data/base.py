"""Shared HTTP plumbing for statistics API fetchers."""

import logging
from contextlib import contextmanager
from typing import Any

import httpx

from inflation_calculator.config import Settings
from inflation_calculator.exceptions import DataSourceUnavailable


logger = logging.getLogger(__name__)

# Raised by dict/list/pandas access on a payload that has the wrong shape
PAYLOAD_SHAPE_ERRORS = (KeyError, TypeError, ValueError, AttributeError, IndexError)


class HttpClientMixin:
    """Lazy httpx client that is only closed if this object created it."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ) -> None:
        self.settings = settings or Settings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.settings.request_timeout)
        return self._client

    def close(self) -> None:
        """Close HTTP client if this object created it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args) -> None:
        self.close()


class BaseFetcher(HttpClientMixin):
    """HTTP client plus error translation to DataSourceUnavailable."""

    SOURCE = "unknown"

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body."""
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"{self.SOURCE} returned HTTP {e.response.status_code}")
            raise DataSourceUnavailable(
                self.SOURCE, f"HTTP {e.response.status_code}: {e.response.text[:500]}"
            ) from e
        except httpx.HTTPError as e:
            raise DataSourceUnavailable(self.SOURCE, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise DataSourceUnavailable(self.SOURCE, "response is not valid JSON") from e

    def _unexpected(self, what: str) -> DataSourceUnavailable:
        return DataSourceUnavailable(self.SOURCE, f"unexpected payload: {what}")

    @contextmanager
    def _reading(self, what: str):
        """Report a payload that does not have the expected shape as DataSourceUnavailable."""
        try:
            yield
        except PAYLOAD_SHAPE_ERRORS as e:
            raise self._unexpected(f"{what} ({type(e).__name__}: {e})") from e
