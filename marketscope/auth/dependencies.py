"""
FastAPI Authentication Dependencies

Resolves the requesting user. Every other route dependency builds on this.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from marketscope.database.models import User, UserRole
from marketscope.database.session import get_db
from marketscope.utils.config import get_settings
from .jwt import JWTError, extract_user_info, verify_token

logger = logging.getLogger(__name__)

# HTTP Bearer token extraction
security = HTTPBearer(auto_error=False)

DEV_USER_ID = "dev-user"
DEV_USER_EMAIL = "dev@marketscope.local"


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user.

    Raises:
        HTTPException 401: missing or invalid token
        HTTPException 403: user is disabled
    """
    if not get_settings().AUTH_ENABLED:
        return _get_dev_user(db)

    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = verify_token(credentials.credentials)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = sync_user(db, payload)
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )
    return user


def sync_user(db: Session, payload: Dict[str, Any]) -> User:
    """Create the local user on first access, refresh email/name afterwards."""
    info = extract_user_info(payload)
    user = db.get(User, info["id"])

    if user is None:
        logger.info(f"Creating new user: {info['email'] or info['id']}")
        user = User(
            id=info["id"],
            email=info["email"],
            full_name=info["full_name"],
            role=UserRole.USER,
            is_active=True,
        )
        db.add(user)
    else:
        user.email = info["email"] or user.email
        user.full_name = info["full_name"] or user.full_name
        user.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(user)
    return user


def _get_dev_user(db: Session) -> User:
    """
    Get or create a development user when auth is disabled.

    This allows local development without a token issuer.
    """
    user = db.get(User, DEV_USER_ID)
    if not user:
        user = User(
            id=DEV_USER_ID,
            email=DEV_USER_EMAIL,
            full_name="Development User",
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    return user
