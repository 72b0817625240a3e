"""
GitHub sign-in: create or refresh the user behind a verified identity.
"""
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codeclub.core.errors import ConflictError
from codeclub.features.members.models import Member
from codeclub.features.permissions.models import UserRole
from codeclub.features.users.models import User
from codeclub.features.users.schemas import GitHubIdentity
from codeclub.utils import get_logger


log = get_logger(__name__)


async def get_user_by_github_id(db: AsyncSession, github_id: str) -> User | None:
    result = await db.execute(select(User).where(User.github_id == github_id))
    return result.scalar_one_or_none()


async def upsert_github_user(
    db: AsyncSession,
    identity: GitHubIdentity,
    role: UserRole = UserRole.PENDING,
    is_active: bool = False,
    is_lead: bool = False,
) -> tuple[User, bool]:
    """
    Find the user for ``identity`` or create it with a Member Profile.

    ``role``, ``is_active`` and ``is_lead`` only apply to a new user; an
    existing user keeps its authorization state and only has its GitHub
    profile fields and ``last_login_at`` refreshed.

    Returns:
        (user, created)

    Raises:
        ConflictError: a concurrent sign-in inserted the same identity
    """
    now = datetime.now(timezone.utc)
    user = await get_user_by_github_id(db, identity.github_id)
    created = user is None

    if created:
        user = User(
            github_id=identity.github_id,
            username=identity.username,
            email=identity.email,
            avatar_url=identity.avatar_url,
            github_url=identity.github_url,
            role=role,
            is_active=is_active,
            is_lead=is_lead,
            last_login_at=now,
        )
        user.member = Member(full_name=identity.name or identity.username)
        db.add(user)
    else:
        user.username = identity.username
        user.email = identity.email or user.email
        user.avatar_url = identity.avatar_url or user.avatar_url
        user.github_url = identity.github_url or user.github_url
        user.last_login_at = now

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("This GitHub account is already registered")

    await db.refresh(user)
    if created:
        log.info(f"New user {user.username} ({user.id}) signed up as {user.role.value}")
    return user, created
