"""
Security Helpers Module

Password hashing (bcrypt) and JWT handling (python-jose) for session tokens
and for the capability tokens embedded in signed file URLs.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

import bcrypt
from jose import jwt

from casino_crm.core.config import settings


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(
    subject: Union[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a session token whose "sub" claim is the user's email.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_signed_token(claims: Dict[str, Any], expires_in: int, secret: str) -> str:
    """Encode ``claims`` with an expiry ``expires_in`` seconds from now."""
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode(payload, secret, algorithm=settings.ALGORITHM)


def decode_token(token: str, secret: str = None) -> Dict[str, Any]:
    # Raises jose.JWTError (ExpiredSignatureError included) on a bad token
    return jwt.decode(token, secret or settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
