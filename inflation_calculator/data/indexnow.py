"""Best-effort IndexNow pings after data updates.

Submissions are at-most-once: no retry, and failures are logged and
dropped so they never affect the outcome of the update that triggered them.
"""

import logging
from urllib.parse import urlparse

import httpx

from inflation_calculator.data.base import HttpClientMixin


logger = logging.getLogger(__name__)

INDEXNOW_ENDPOINT = "https://api.indexnow.org/indexnow"


class IndexNowNotifier(HttpClientMixin):
    """Submits changed page URLs to the IndexNow endpoint."""

    def _absolute_urls(self, paths: list[str]) -> list[str]:
        base = self.settings.site_url.rstrip("/")
        return [path if path.startswith("http") else f"{base}{path}" for path in paths]

    def submit(self, paths: list[str]) -> bool:
        """
        Submit pages once.

        Returns:
            True if the endpoint accepted the submission, False otherwise
            (including when IndexNow is not configured)
        """
        if not self.settings.has_indexnow():
            logger.debug("INDEXNOW_KEY not set, skipping submission")
            return False
        if not paths:
            return False

        site = self.settings.site_url.rstrip("/")
        payload = {
            "host": urlparse(site).hostname,
            "key": self.settings.indexnow_key,
            "keyLocation": f"{site}/{self.settings.indexnow_key}.txt",
            "urlList": self._absolute_urls(paths),
        }

        try:
            response = self.client.post(INDEXNOW_ENDPOINT, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"IndexNow submission failed: {e}")
            return False

        if response.status_code >= 400:
            logger.warning(f"IndexNow submission rejected: HTTP {response.status_code}")
            return False

        logger.info(f"IndexNow accepted {len(payload['urlList'])} URLs")
        return True
