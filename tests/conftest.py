"""
Shared fixtures: a throwaway SQLite database per test, model factories and
an HTTP client bound to the app with ``get_db`` pointed at that database.
"""
import itertools
import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("JWT_SECRET", "test-secret-for-codeclub-tests")

import httpx
import pytest

from codeclub.core.database.engine import build_engine, build_sessionmaker, get_db, init_db
from codeclub.features.members.models import Member
from codeclub.features.permissions.models import Principal, UserRole
from codeclub.features.projects.models import Project
from codeclub.features.roles.models import CustomRole
from codeclub.features.users.auth import create_access_token
from codeclub.features.users.models import User
from codeclub.main import app


_github_ids = itertools.count(1000)


@pytest.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make_user(
        username: str = "member",
        role: UserRole = UserRole.MEMBER,
        is_active: bool | None = None,
        is_lead: bool = False,
        custom_role: CustomRole | None = None,
        with_member: bool = True,
    ) -> User:
        if is_active is None:
            is_active = role != UserRole.PENDING
        user = User(
            github_id=str(next(_github_ids)),
            username=username,
            email=f"{username}@example.com",
            role=role,
            is_active=is_active,
            is_lead=is_lead,
            custom_role_id=custom_role.id if custom_role else None,
        )
        if with_member:
            user.member = Member(full_name=username.title())
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_role(db):
    async def _make_role(name: str = "Moderator", permissions=("VIEW_DASHBOARD", "MANAGE_MEMBERS")) -> CustomRole:
        role = CustomRole(name=name, color="#3B82F6", permissions=list(permissions))
        db.add(role)
        await db.commit()
        await db.refresh(role)
        return role

    return _make_role


@pytest.fixture
def make_project(db):
    async def _make_project(owner: User, title: str = "Club site", is_approved: bool = False) -> Project:
        project = Project(title=title, member_id=owner.member.id, is_approved=is_approved)
        db.add(project)
        await db.commit()
        await db.refresh(project)
        return project

    return _make_project


@pytest.fixture
async def admin(make_user):
    return await make_user("admin", role=UserRole.ADMIN, is_lead=True)


def principal(user: User) -> Principal:
    return Principal.from_user(user)


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}
