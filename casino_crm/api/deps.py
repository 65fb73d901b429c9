"""
API Dependencies Module

This module provides FastAPI dependency functions for authentication and for
the object store. Authentication accepts a bearer token (API clients) or the
HTTP-only ``access_token`` cookie (browser clients).
"""
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlmodel import Session, select

from casino_crm.core.config import settings
from casino_crm.core.errors import Unauthorized
from casino_crm.core.security import decode_token
from casino_crm.db.session import get_db
from casino_crm.models.user import User
from casino_crm.schemas.auth import TokenData
from casino_crm.services.storage import Storage, storage_from_settings

# auto_error=False allows us to check cookies as a fallback
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False  # Don't raise error immediately if Authorization header is missing
)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(reusable_oauth2)
) -> User:
    """
    Dependency that retrieves and validates the current authenticated user.

    The bearer token in the Authorization header wins; otherwise the
    access_token cookie is used.

    Raises:
        Unauthorized: no token, a token that does not decode or has expired,
            or a token for an unknown or disabled user
    """
    # Try Authorization header first, then fall back to cookie
    if not token:
        token = request.cookies.get("access_token")
        # Cookie format is "Bearer <token>", so we need to extract the token
        if token and token.startswith("Bearer "):
            token = token.replace("Bearer ", "")

    if not token:
        raise Unauthorized()

    try:
        payload = decode_token(token)
        token_data = TokenData(email=payload.get("sub"))
    except (JWTError, ValidationError):
        raise Unauthorized("Could not validate credentials")

    if not token_data.email:
        raise Unauthorized("Could not validate credentials")

    user = db.exec(select(User).where(User.email == token_data.email)).first()
    if not user or not user.is_active:
        raise Unauthorized()
    return user


@lru_cache
def _storage() -> Storage:
    return storage_from_settings(settings)


def get_storage() -> Storage:
    """Object store configured by STORAGE_BACKEND; overridden in tests."""
    return _storage()
