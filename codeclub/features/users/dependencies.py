"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.database.engine import get_db
from codeclub.core.errors import ForbiddenError
from codeclub.features.permissions.models import Principal
from codeclub.features.users.models import User
from codeclub.features.users.auth import verify_access_token


bearer_scheme = HTTPBearer(auto_error=False)


async def _load_user(db: AsyncSession, token: str) -> User:
    payload = verify_access_token(token)
    user_id = payload.get("sub")

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Pending (inactive) users are returned too; use ``get_current_active_user``
    for member-only routes.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await _load_user(db, credentials.credentials)


async def get_current_principal(
    user: Annotated[User, Depends(get_current_user)]
) -> Principal:
    """The caller's authorization snapshot, built once per request."""
    return Principal.from_user(user)


async def get_optional_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> Principal | None:
    """Like ``get_current_principal`` but anonymous requests yield ``None``."""
    if credentials is None:
        return None
    user = await _load_user(db, credentials.credentials)
    return Principal.from_user(user)


async def get_current_active_user(
    user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Require an approved (active) account."""
    if not user.is_active:
        raise ForbiddenError("Account is not active. Awaiting admin approval.")
    return user


def get_authorization_header(request: Request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or (request.client.host if request.client else "anonymous")
