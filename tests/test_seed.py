"""
Seed bootstrap: superadmin, preset roles and catalogs.
"""
from sqlalchemy import func, select

from codeclub.core import config
from codeclub.features.permissions.models import UserRole
from codeclub.features.roles.models import CustomRole
from codeclub.features.roles.service import RoleService
from codeclub.features.skills.models import Skill
from codeclub.features.tags.models import Tag
from codeclub.features.users.models import User
from codeclub.features.users.schemas import GitHubIdentity
from scripts.seed import (
    DEFAULT_SKILLS,
    DEFAULT_TAGS,
    ROLE_PRESETS,
    bootstrap_superadmin,
    seed,
    seed_role_presets,
    seed_skills,
    seed_tags,
    superadmin_identity_from_env,
)


IDENTITY = GitHubIdentity(github_id="42", username="founder", email="founder@example.com")


async def _roles_by_name(db) -> dict[str, CustomRole]:
    result = await db.execute(select(CustomRole))
    return {role.name: role for role in result.scalars().all()}


async def test_presets_created_once_then_reconciled(db):
    counts = await seed_role_presets(db)
    assert counts == {"created": 6, "updated": 0}

    roles = await _roles_by_name(db)
    assert set(roles) == {
        "Moderator",
        "Content Manager",
        "Project Reviewer",
        "Event Coordinator",
        "Tech Lead",
        "Community Manager",
    }
    for name, preset in ROLE_PRESETS.items():
        assert roles[name].permissions == [permission.value for permission in preset["permissions"]]
        assert roles[name].color == preset["color"]

    # Drift one role, then re-run
    await RoleService(db).update_role(roles["Moderator"].id, color="#000000", permissions=["MANAGE_TAGS"])

    counts = await seed_role_presets(db)
    assert counts == {"created": 0, "updated": 6}
    assert await db.scalar(select(func.count()).select_from(CustomRole)) == 6

    moderator = (await _roles_by_name(db))["Moderator"]
    await db.refresh(moderator)
    assert moderator.color == "#3B82F6"
    assert moderator.permissions == ["VIEW_DASHBOARD", "MANAGE_MEMBERS", "MANAGE_PROJECTS"]


async def test_bootstrap_superadmin(db):
    admin = await bootstrap_superadmin(db, IDENTITY)
    assert (admin.role, admin.is_active, admin.is_lead) == (UserRole.ADMIN, True, True)
    assert admin.member is not None

    again = await bootstrap_superadmin(db, IDENTITY)
    assert again.id == admin.id
    assert await db.scalar(select(func.count()).select_from(User)) == 1


async def test_bootstrap_promotes_existing_pending_user(db, make_user):
    user = await make_user("founder", role=UserRole.PENDING)
    identity = GitHubIdentity(github_id=user.github_id, username="founder", email="founder@example.com")

    admin = await bootstrap_superadmin(db, identity)
    assert admin.id == user.id
    assert (admin.role, admin.is_active, admin.is_lead) == (UserRole.ADMIN, True, True)


async def test_presets_attributed_to_superadmin(db):
    admin = await bootstrap_superadmin(db, IDENTITY)
    await seed_role_presets(db, created_by_id=admin.id)

    roles = await _roles_by_name(db)
    assert {role.created_by_id for role in roles.values()} == {admin.id}


def test_superadmin_identity_requires_all_variables(monkeypatch):
    monkeypatch.setattr(config, "SUPERADMIN_GITHUB_ID", "42")
    monkeypatch.setattr(config, "SUPERADMIN_USERNAME", "founder")
    monkeypatch.setattr(config, "SUPERADMIN_EMAIL", None)
    assert superadmin_identity_from_env() is None

    monkeypatch.setattr(config, "SUPERADMIN_EMAIL", "founder@example.com")
    monkeypatch.setattr(config, "SUPERADMIN_GITHUB_URL", None)
    identity = superadmin_identity_from_env()
    assert identity.github_id == "42"
    assert identity.github_url == "https://github.com/founder"


async def test_catalog_seed_swallows_duplicates(db):
    assert await seed_tags(db) == len(DEFAULT_TAGS)
    assert await seed_skills(db) == len(DEFAULT_SKILLS)

    assert await seed_tags(db) == 0
    assert await seed_skills(db) == 0
    assert await db.scalar(select(func.count()).select_from(Tag)) == len(DEFAULT_TAGS)
    assert await db.scalar(select(func.count()).select_from(Skill)) == len(DEFAULT_SKILLS)


async def test_seed_skips_superadmin_without_env(db, monkeypatch):
    monkeypatch.setattr(config, "SUPERADMIN_GITHUB_ID", None)

    await seed(db)

    assert await db.scalar(select(func.count()).select_from(User)) == 0
    roles = await _roles_by_name(db)
    assert len(roles) == 6
    assert all(role.created_by_id is None for role in roles.values())
