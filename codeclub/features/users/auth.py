"""
Access token issuing and verification.

Tokens are HS256 JWTs signed with ``JWT_SECRET``; ``sub`` holds the user id.
The role claim is informational only, authorization always re-reads the user.
"""
from datetime import datetime, timedelta, timezone
import jwt
from fastapi import HTTPException, status

from codeclub.core import config


def create_access_token(user_id: str, role: str, expires_in: int | None = None) -> str:
    """Issue a signed access token for ``user_id``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in if expires_in is not None else config.JWT_EXPIRE_SECONDS),
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_access_token(token: str) -> dict:
    """
    Verify an access token and return its payload.

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])

    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
