"""
External Integrations

- Moz: SEO authority metrics (Links API v2)
"""

from .moz import MozClient, MozError, RetryConfig
from .config import build_moz_client

__all__ = [
    "MozClient",
    "MozError",
    "RetryConfig",
    "build_moz_client",
]
