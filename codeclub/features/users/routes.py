"""
Authentication routes.

The frontend either completes GitHub OAuth itself and forwards the verified
identity to ``/auth/github``, or hands the OAuth code to
``/auth/github/callback``. Both answer with our own bearer token.
"""
import hmac
from typing import Annotated
from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core import config
from codeclub.core.database.engine import get_db
from codeclub.core.rate_limit import limiter
from codeclub.features.notifications import notify_new_user_signup
from codeclub.features.users.auth import create_access_token
from codeclub.features.users.dependencies import get_current_user
from codeclub.features.users.github import GitHubClient, get_github_client
from codeclub.features.users.models import User
from codeclub.features.users.schemas import (
    AuthResponse,
    GitHubCallbackRequest,
    GitHubIdentity,
    GitHubRepo,
    UserResponse,
)
from codeclub.features.users.service import upsert_github_user


router = APIRouter()


async def _sign_in(db: AsyncSession, identity: GitHubIdentity, background_tasks: BackgroundTasks) -> AuthResponse:
    user, created = await upsert_github_user(db, identity)
    if created:
        background_tasks.add_task(notify_new_user_signup, user.username, user.email)

    token = create_access_token(user.id, user.role.value)
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/github", response_model=AuthResponse)
@limiter.limit("20/minute")
async def sign_in_with_github(
    request: Request,
    identity: GitHubIdentity,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    bridge_secret: Annotated[str | None, Header(alias="X-Auth-Bridge-Secret")] = None
):
    """
    Exchange a GitHub identity verified by the frontend for an access token.

    The caller must present ``AUTH_BRIDGE_SECRET``. Without a configured
    secret the bridge is disabled and only the OAuth callback signs in.
    """
    if not config.AUTH_BRIDGE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sign-in bridge disabled",
        )
    if not hmac.compare_digest((bridge_secret or "").encode(), config.AUTH_BRIDGE_SECRET.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid auth bridge secret",
        )
    return await _sign_in(db, identity, background_tasks)


@router.post("/github/callback", response_model=AuthResponse)
@limiter.limit("10/minute")
async def github_callback(
    request: Request,
    callback: GitHubCallbackRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    github: Annotated[GitHubClient, Depends(get_github_client)]
):
    """Complete the GitHub OAuth code flow server-side."""
    access_token = await github.exchange_code_for_token(callback.code)
    profile = await github.get_user(access_token)

    identity = GitHubIdentity(
        github_id=profile["id"],
        username=profile["login"],
        email=profile.get("email"),
        avatar_url=profile.get("avatar_url"),
        github_url=profile.get("html_url"),
        name=profile.get("name"),
    )
    return await _sign_in(db, identity, background_tasks)


@router.get("/me", response_model=UserResponse)
async def get_me(user: Annotated[User, Depends(get_current_user)]):
    """The signed-in user, including pending accounts."""
    return user


@router.get("/github/repos", response_model=list[GitHubRepo])
async def list_my_repos(
    user: Annotated[User, Depends(get_current_user)],
    github: Annotated[GitHubClient, Depends(get_github_client)]
):
    """The caller's public GitHub repositories, most recently updated first."""
    return await github.get_user_repos(user.username)
