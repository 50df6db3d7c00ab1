"""
GitHub raw-content fetcher.

Reads files through the public raw endpoint:
  GET https://raw.githubusercontent.com/{owner}/{repo}/{commit}/{path}
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from push_release.errors import MetadataFetchError

logger = logging.getLogger(__name__)

GITHUB_RAW_URL = "https://raw.githubusercontent.com"
HTTP_TIMEOUT_S = 15.0


class GitHubRawFetcher:
    """Fetch repository files at a commit from GitHub."""

    def __init__(
        self,
        repo: str,
        *,
        base_url: str = GITHUB_RAW_URL,
        timeout: float = HTTP_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.repo = repo
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", repo)

    def url_for(self, commit: str, path: str) -> str:
        return f"{self.base_url}/{self.repo}/{commit}/{path.lstrip('/')}"

    def fetch(self, commit: str, path: str) -> str:
        url = self.url_for(commit, path)
        logger.debug("Fetching %s", url)
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise MetadataFetchError(url, f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code == 404:
            raise MetadataFetchError(url, "not found (HTTP 404)")
        if resp.status_code == 429:
            raise MetadataFetchError(url, "rate limited (HTTP 429)")
        if resp.status_code >= 400:
            raise MetadataFetchError(url, f"HTTP {resp.status_code}")
        return resp.text
