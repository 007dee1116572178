"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Retry with exponential backoff and jitter
- Error classification (upstream vs transport)
- Optional on-disk response cache
"""

import random
import time
import requests
from typing import Dict, Any, Optional
from loguru import logger

from .cache import OSMCache
from ...config import get_config, PipelineConfig
from ...exceptions import TransportError, UpstreamServiceError


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    # Rate limiting and gateway errors; anything else is not worth repeating
    RETRYABLE_STATUS = (429, 502, 503, 504)

    def __init__(self, config: Optional[PipelineConfig] = None, cache: Optional[OSMCache] = None):
        self.config = config or get_config()
        self.overpass_url = self.config.api.overpass_url
        self.timeout = self.config.api.request_timeout
        self.max_retries = self.config.api.max_retries
        self.cache = cache or OSMCache(self.config.cache_dir)
        self._last_request_time = 0.0
        self._min_request_interval = self.config.api.min_request_interval

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential delay for the given zero-based attempt, plus random jitter"""
        api = self.config.api
        delay = min(api.retry_max_delay, api.retry_delay * (2 ** attempt))
        return delay + random.uniform(0, api.retry_jitter)

    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute Overpass API query with retry logic

        Args:
            query: Overpass QL query string

        Returns:
            JSON response from Overpass API ({"elements": [...]})

        Raises:
            UpstreamServiceError: Non-success status (or unusable body) after all retries
            TransportError: Network failure after all retries
        """
        cache_path = self.cache.get_cache_path(query)
        if cache_path:
            cached = self.cache.load(cache_path)
            if cached is not None:
                return cached

        headers = {
            "User-Agent": self.config.api.user_agent,
            "Content-Type": "application/x-www-form-urlencoded"
        }

        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            self._rate_limit()

            try:
                response = requests.post(
                    self.overpass_url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                if last_attempt:
                    logger.error(f"Overpass request failed after {self.max_retries} attempts: {e}")
                    raise TransportError(f"Overpass request failed: {e}") from e
                wait_time = self._backoff_delay(attempt)
                logger.warning(f"Overpass request failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                               f"Retrying in {wait_time:.1f}s...")
                time.sleep(wait_time)
                continue

            if not response.ok:
                if response.status_code in self.RETRYABLE_STATUS and not last_attempt:
                    wait_time = self._backoff_delay(attempt)
                    logger.warning(f"Overpass {response.status_code} (attempt {attempt + 1}/{self.max_retries}). "
                                   f"Retrying in {wait_time:.1f}s...")
                    time.sleep(wait_time)
                    continue
                logger.error(f"Overpass API failed: HTTP {response.status_code}")
                raise UpstreamServiceError(response.status_code, response.text)

            try:
                data = response.json()
            except ValueError as e:
                raise UpstreamServiceError(response.status_code, response.text) from e
            if not isinstance(data, dict):
                logger.error(f"Overpass returned a JSON {type(data).__name__}, expected an object")
                raise UpstreamServiceError(response.status_code, response.text)

            # Runtime errors (e.g. server-side timeout) come back as 200 with a remark
            remark = data.get("remark")
            if remark and not data.get("elements"):
                if last_attempt:
                    raise UpstreamServiceError(response.status_code, remark)
                wait_time = self._backoff_delay(attempt)
                logger.warning(f"Overpass remark: {remark} (attempt {attempt + 1}/{self.max_retries}). "
                               f"Retrying in {wait_time:.1f}s...")
                time.sleep(wait_time)
                continue
            if remark:
                logger.warning(f"Overpass remark (non-fatal): {remark}")

            if cache_path:
                self.cache.save(cache_path, data)
            return data

        # max_retries < 1 is rejected by validate_config
        raise TransportError("Overpass query was not attempted (max_retries < 1)")
