"""
Moz Links API Client

SEO authority metrics for competitor websites.

Moz provides:
- Domain Authority / Page Authority (0-100)
- Spam score
- Linking root domains and total external links

API: https://moz.com/api/docs/links/url-metrics
Auth: HTTP Basic with access id + secret key
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from marketscope.output.normalizer import normalize_seo_metrics
from marketscope.output.schemas import SEOMetrics
from marketscope.utils.text import ensure_scheme

logger = logging.getLogger(__name__)


class MozError(Exception):
    """Custom exception for Moz API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 2
    initial_delay: float = 1.0
    max_delay: float = 8.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


class MozClient:
    """
    Async client for the Moz Links API v2.

    Usage:
        async with MozClient(access_id="...", secret_key="...") as moz:
            metrics = await moz.analyze("acme.com")
            # metrics.domain_authority = 72
            # metrics.seo_strength = "Very Strong"
    """

    BASE_URL = "https://lsapi.seomoz.com/v2"

    def __init__(
        self,
        access_id: Optional[str],
        secret_key: Optional[str],
        timeout: float = 15.0,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Moz client.

        Args:
            access_id: Moz access id
            secret_key: Moz secret key
            timeout: Per-request timeout in seconds
            retry_config: Retry configuration (optional)
            transport: Custom httpx transport (tests)
        """
        self.access_id = access_id
        self.secret_key = secret_key
        self.retry_config = retry_config or RetryConfig()

        auth = httpx.BasicAuth(access_id, secret_key) if self.is_configured else None
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            auth=auth,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._closed = False

    @property
    def is_configured(self) -> bool:
        return bool(self.access_id and self.secret_key)

    async def get_url_metrics(self, urls: List[str]) -> List[Dict[str, Any]]:
        """
        Raw url_metrics results, one dict per target, in request order.

        Raises:
            MozError: credentials missing, non-retryable error, retries exhausted
        """
        if self._closed:
            raise MozError("Client has been closed")
        if not self.is_configured:
            raise MozError("Moz credentials not configured")

        payload = {"targets": [ensure_scheme(url) for url in urls]}
        data = await self._request_with_retry("/url_metrics", payload)

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise MozError("Unexpected response shape from Moz", response=data)
        return results

    async def analyze(self, url: str) -> SEOMetrics:
        """
        Fetch authority metrics for one URL.

        The scheme is added when missing. An empty result set is an error,
        not zeroed metrics; degradation is the caller's decision.
        """
        target = ensure_scheme(url)
        results = await self.get_url_metrics([target])
        if not results or not isinstance(results[0], dict):
            raise MozError(f"No metrics returned for {target}")

        metrics = normalize_seo_metrics(results[0])
        logger.info(
            f"Moz metrics for {target}: DA={metrics.domain_authority}, "
            f"PA={metrics.page_authority}, strength={metrics.seo_strength}"
        )
        return metrics

    async def _request_with_retry(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make request with retry logic."""
        config = self.retry_config
        last_exception = None

        for attempt in range(config.max_retries + 1):
            try:
                response = await self._client.post(path, json=payload)

                if response.status_code >= 400:
                    error_data = _safe_json(response)

                    if response.status_code in config.retryable_status_codes:
                        last_exception = MozError(
                            f"API error: {response.status_code}",
                            status_code=response.status_code,
                            response=error_data,
                        )
                    else:
                        raise MozError(
                            f"API error: {error_data.get('message', response.status_code)}",
                            status_code=response.status_code,
                            response=error_data,
                        )
                else:
                    return _safe_json(response)

            except httpx.TimeoutException as e:
                last_exception = MozError(f"Request timed out: {e}")
            except httpx.RequestError as e:
                last_exception = MozError(f"Request failed: {e}")

            if attempt < config.max_retries:
                delay = min(
                    config.initial_delay * (config.exponential_base**attempt),
                    config.max_delay,
                )
                logger.warning(
                    f"Moz request failed, retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{config.max_retries + 1})"
                )
                await asyncio.sleep(delay)

        raise last_exception

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _safe_json(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
