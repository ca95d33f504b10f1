"""
Bearer token authentication.

Validates the JWT in the Authorization header and yields the caller's user
id (the `sub` claim). Tokens are normally issued elsewhere;
create_access_token exists for local tooling and tests.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _secret_key() -> str:
    key = os.getenv("JWT_SECRET_KEY")
    if not key:
        raise RuntimeError("JWT_SECRET_KEY env var is not set")
    return key


def _algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        minutes = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))
        expires_delta = timedelta(minutes=minutes)

    now = datetime.now(timezone.utc)
    claims = {"sub": str(user_id), "iat": now, "exp": now + expires_delta}
    return jwt.encode(claims, _secret_key(), algorithm=_algorithm())


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None if the token is invalid or expired."""
    try:
        payload = jwt.decode(token, _secret_key(), algorithms=[_algorithm()])
    except JWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        return None

    if not payload.get("sub"):
        return None
    return payload


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    payload = decode_access_token(credentials.credentials) if credentials else None
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload["sub"]
