"""
HTTP fetcher shared by the providers.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from ..config.settings import Config
from ..exceptions import UpstreamError, UpstreamTimeoutError
from ..storage.cache import ResponseCache
from ..utils.logging import get_logger, log_performance


class PageFetcher:
    """Fetches remote documents with a timeout and an optional response cache."""

    def __init__(self, config: Config, cache: Optional[ResponseCache] = None):
        """Initialize fetcher with configuration and an optional cache."""
        self.config = config
        self.cache = cache
        self.logger = get_logger(__name__)

        self.headers = {
            'User-Agent': config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        }

    @staticmethod
    def cache_key(url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build the cache key for a URL and its query parameters."""
        if not params:
            return url
        return requests.Request('GET', url, params=params).prepare().url

    @log_performance
    def fetch_text(self, url: str, timeout: Optional[float] = None,
                   headers: Optional[Dict[str, str]] = None,
                   params: Optional[Dict[str, Any]] = None,
                   check_status: bool = True) -> str:
        """Fetch a URL and return the response body as text.

        Raises UpstreamTimeoutError when the deadline passes and
        UpstreamError for other network failures or error statuses. Only
        successful responses are cached.
        """
        key = self.cache_key(url, params)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug(f"Cache hit: {key}")
                return cached

        response = self._get(url, timeout, headers, params)

        if check_status:
            self._check_status(response)

        text = response.text
        if self.cache is not None:
            self.cache.set(key, text)
        return text

    def fetch_json(self, url: str, timeout: Optional[float] = None,
                   headers: Optional[Dict[str, str]] = None,
                   params: Optional[Dict[str, Any]] = None) -> Any:
        """Fetch a URL and decode its JSON body (never cached)."""
        request_headers = {'Accept': 'application/json'}
        request_headers.update(headers or {})

        response = self._get(url, timeout, request_headers, params)
        self._check_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {urlparse(url).netloc}: {e}")

    def _get(self, url: str, timeout: Optional[float], headers: Optional[Dict[str, str]],
             params: Optional[Dict[str, Any]]) -> requests.Response:
        timeout = self.config.request_timeout if timeout is None else timeout
        request_headers = dict(self.headers)
        request_headers.update(headers or {})
        host = urlparse(url).netloc or url

        self.logger.debug(f"Fetching: {url}")
        try:
            return requests.get(url, headers=request_headers, params=params, timeout=timeout)
        except requests.Timeout as e:
            self.logger.warning(f"Timeout fetching {url}: {e}")
            raise UpstreamTimeoutError(f"Connection to {host} timed out")
        except requests.RequestException as e:
            self.logger.error(f"Network error fetching {url}: {e}")
            raise UpstreamError(f"Failed to fetch from {host}: {e}")

    @staticmethod
    def _check_status(response: requests.Response) -> None:
        status = response.status_code
        if status == 404:
            raise UpstreamError("Page not found (404)", status_code=status)
        if status >= 400:
            raise UpstreamError(f"HTTP error: {status}", status_code=status)
