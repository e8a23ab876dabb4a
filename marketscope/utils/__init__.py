"""Utility modules for MarketScope."""

from .config import Settings, get_settings
from .text import count_words, ensure_scheme, normalize_domain

__all__ = [
    "Settings",
    "get_settings",
    "count_words",
    "ensure_scheme",
    "normalize_domain",
]
