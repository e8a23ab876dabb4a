"""
External API Configuration

Factory for the metrics client, built from Settings.

Environment variables:
- MOZ_ACCESS_ID / MOZ_SECRET_KEY: Moz credentials (optional; without them
  every metrics call degrades)
- METRICS_TIMEOUT: per-request timeout in seconds
- METRICS_MAX_RETRIES: retries after the first attempt
"""

import logging
from typing import Optional

from marketscope.utils.config import Settings, get_settings
from .moz import MozClient, RetryConfig

logger = logging.getLogger(__name__)


def build_moz_client(settings: Optional[Settings] = None) -> MozClient:
    """Create a MozClient from settings and log whether it is usable."""
    settings = settings or get_settings()
    client = MozClient(
        access_id=settings.MOZ_ACCESS_ID,
        secret_key=settings.MOZ_SECRET_KEY,
        timeout=settings.METRICS_TIMEOUT,
        retry_config=RetryConfig(max_retries=settings.METRICS_MAX_RETRIES),
    )
    logger.info(f"Moz metrics {'enabled' if client.is_configured else 'disabled (no credentials)'}")
    return client
