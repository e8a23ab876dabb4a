"""
JWT Token Validation

Verifies bearer tokens signed with the shared secret (HS256 by default).
"""

import logging
from typing import Any, Dict

import jwt
from jwt import PyJWTError

from marketscope.utils.config import get_settings

logger = logging.getLogger(__name__)


class JWTError(Exception):
    """Custom JWT validation error."""
    pass


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a bearer token.

    Returns:
        Decoded payload; always carries a 'sub' claim

    Raises:
        JWTError: invalid, expired or malformed token, or no secret configured
    """
    settings = get_settings()
    if not settings.JWT_SECRET:
        raise JWTError("JWT_SECRET not configured")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidAudienceError:
        raise JWTError("Invalid token audience")
    except jwt.InvalidSignatureError:
        raise JWTError("Invalid token signature")
    except jwt.DecodeError as e:
        raise JWTError(f"Token decode error: {str(e)}")
    except PyJWTError as e:
        raise JWTError(f"Token validation error: {str(e)}")

    if not payload.get("sub"):
        raise JWTError("Token missing 'sub' claim (user ID)")

    return payload


def extract_user_info(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    User fields from a verified payload.

    {
        "sub": "user-id",
        "email": "user@example.com",
        "user_metadata": {"full_name": "Jane Doe"},
        ...
    }
    """
    user_metadata = payload.get("user_metadata") or {}
    return {
        "id": str(payload.get("sub")),
        "email": payload.get("email"),
        "full_name": user_metadata.get("full_name") or user_metadata.get("name") or payload.get("name"),
    }
