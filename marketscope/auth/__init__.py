"""
Authentication Module

Resolves the requesting user from a bearer JWT, or a local dev user when
AUTH_ENABLED is false.
"""

from .dependencies import get_current_user, sync_user
from .jwt import JWTError, extract_user_info, verify_token

__all__ = [
    "get_current_user",
    "sync_user",
    "JWTError",
    "extract_user_info",
    "verify_token",
]
