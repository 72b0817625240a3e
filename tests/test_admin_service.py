"""
Admin member and project workflows.
"""
import pytest
from sqlalchemy import select

from codeclub.core.errors import ForbiddenError, NotFoundError, ValidationError
from codeclub.features.admin.service import AdminService
from codeclub.features.permissions.dependencies import has_permission
from codeclub.features.permissions.models import Permission, UserRole
from codeclub.features.projects.models import Project, project_tags
from codeclub.features.tags.models import Tag

from conftest import principal


async def test_approve_member_is_idempotent(db, admin, make_user):
    pending = await make_user("newbie", role=UserRole.PENDING)
    service = AdminService(db)

    for _ in range(2):
        user = await service.approve_member(principal(admin), pending.id)
        assert (user.role, user.is_active) == (UserRole.MEMBER, True)


async def test_reject_then_approve_keeps_lead_flag(db, admin, make_user):
    for is_lead in (True, False):
        user = await make_user(f"lead-{is_lead}", is_lead=is_lead)
        service = AdminService(db)

        rejected = await service.reject_member(principal(admin), user.id)
        assert (rejected.role, rejected.is_active, rejected.is_lead) == (UserRole.PENDING, False, is_lead)
        assert rejected.member is not None

        approved = await service.approve_member(principal(admin), user.id)
        assert (approved.role, approved.is_active, approved.is_lead) == (UserRole.MEMBER, True, is_lead)


async def test_approve_as_pending_is_invalid(db, admin, make_user):
    pending = await make_user("newbie", role=UserRole.PENDING)
    with pytest.raises(ValidationError):
        await AdminService(db).approve_member(principal(admin), pending.id, UserRole.PENDING)


async def test_admin_cannot_self_demote(db, admin):
    service = AdminService(db)
    with pytest.raises(ForbiddenError) as exc_info:
        await service.update_user_role(principal(admin), admin.id, UserRole.MEMBER, False)
    assert exc_info.value.message == "Cannot self-demote"

    with pytest.raises(ForbiddenError):
        await service.reject_member(principal(admin), admin.id)

    await db.refresh(admin)
    assert admin.role == UserRole.ADMIN
    assert admin.is_active


async def test_admin_can_keep_own_admin_role_and_change_lead(db, admin):
    user = await AdminService(db).update_user_role(principal(admin), admin.id, UserRole.ADMIN, False)
    assert user.role == UserRole.ADMIN
    assert user.is_lead is False


async def test_update_user_role_sets_role_lead_and_active(db, admin, make_user):
    member = await make_user("ada")
    service = AdminService(db)

    promoted = await service.update_user_role(principal(admin), member.id, UserRole.ADMIN, True)
    assert (promoted.role, promoted.is_lead, promoted.is_active) == (UserRole.ADMIN, True, True)

    demoted = await service.update_user_role(principal(admin), member.id, UserRole.PENDING, False)
    assert (demoted.role, demoted.is_lead, demoted.is_active) == (UserRole.PENDING, False, False)


async def test_admin_can_demote_another_admin(db, admin, make_user):
    other = await make_user("other-admin", role=UserRole.ADMIN)
    user = await AdminService(db).update_user_role(principal(admin), other.id, UserRole.MEMBER, False)
    assert user.role == UserRole.MEMBER


async def test_member_without_permission_is_refused_before_any_write(db, make_user):
    actor = await make_user("plain")
    target = await make_user("target", role=UserRole.PENDING)

    with pytest.raises(ForbiddenError):
        await AdminService(db).approve_member(principal(actor), target.id)

    await db.refresh(target)
    assert (target.role, target.is_active) == (UserRole.PENDING, False)


async def test_unknown_user(db, admin):
    with pytest.raises(NotFoundError):
        await AdminService(db).approve_member(principal(admin), "missing")


async def test_custom_role_moderator_can_approve(db, make_role, make_user):
    moderator = await make_user("mod", custom_role=await make_role())
    pending = await make_user("newbie", role=UserRole.PENDING)

    user = await AdminService(db).approve_member(principal(moderator), pending.id)
    assert user.role == UserRole.MEMBER


async def test_inactive_user_with_custom_role_is_refused(db, make_role, make_user):
    stale = await make_user("stale", role=UserRole.PENDING, custom_role=await make_role())
    pending = await make_user("newbie", role=UserRole.PENDING)

    with pytest.raises(ForbiddenError):
        await AdminService(db).approve_member(principal(stale), pending.id)


async def test_moderator_cannot_grant_or_touch_admin(db, admin, make_role, make_user):
    moderator = await make_user("mod", custom_role=await make_role())
    member = await make_user("ada")
    service = AdminService(db)

    with pytest.raises(ForbiddenError):
        await service.update_user_role(principal(moderator), member.id, UserRole.ADMIN, False)
    with pytest.raises(ForbiddenError):
        await service.approve_member(principal(moderator), member.id, UserRole.ADMIN)
    with pytest.raises(ForbiddenError):
        await service.reject_member(principal(moderator), admin.id)
    with pytest.raises(ForbiddenError):
        await service.set_lead_status(principal(moderator), admin.id, False)

    await db.refresh(admin)
    assert (admin.role, admin.is_active, admin.is_lead) == (UserRole.ADMIN, True, True)


async def test_moderator_cannot_modify_own_account(db, make_role, make_user):
    everything = await make_role("Everything", [permission.value for permission in Permission])
    moderator = await make_user("mod", custom_role=await make_role())
    actor = principal(moderator)
    own_role_id = moderator.custom_role_id
    service = AdminService(db)

    with pytest.raises(ForbiddenError) as exc_info:
        await service.assign_custom_role(actor, moderator.id, everything.id)
    assert exc_info.value.message == "Cannot modify your own account"
    with pytest.raises(ForbiddenError):
        await service.set_lead_status(actor, moderator.id, True)
    with pytest.raises(ForbiddenError):
        await service.update_user_role(actor, moderator.id, UserRole.MEMBER, True)

    await db.refresh(moderator)
    assert (moderator.is_lead, moderator.custom_role_id) == (False, own_role_id)
    assert not has_permission(principal(moderator), Permission.MANAGE_ROLES)


async def test_moderator_cannot_hand_out_permissions_it_lacks(db, make_role, make_user):
    moderator = await make_user("mod", custom_role=await make_role())
    role_manager = await make_role("Role Manager", ["VIEW_DASHBOARD", "MANAGE_ROLES"])
    member = await make_user("ada")
    service = AdminService(db)

    with pytest.raises(ForbiddenError) as exc_info:
        await service.assign_custom_role(principal(moderator), member.id, role_manager.id)
    assert exc_info.value.message == "Cannot assign a role granting permissions you lack: MANAGE_ROLES"

    await db.refresh(member)
    assert member.custom_role_id is None


async def test_moderator_can_assign_role_within_own_permissions(db, make_role, make_user):
    moderator = await make_user("mod", custom_role=await make_role())
    viewer = await make_role("Viewer", ["VIEW_DASHBOARD"])
    member = await make_user("ada")

    user = await AdminService(db).assign_custom_role(principal(moderator), member.id, viewer.id)
    assert user.custom_role.name == "Viewer"


async def test_assign_and_remove_custom_role(db, admin, make_role, make_user):
    role = await make_role("Reviewer", ["MANAGE_PROJECTS"])
    member = await make_user("ada")
    service = AdminService(db)

    user = await service.assign_custom_role(principal(admin), member.id, role.id)
    assert user.custom_role.name == "Reviewer"

    user = await service.assign_custom_role(principal(admin), member.id, None)
    assert user.custom_role is None

    with pytest.raises(NotFoundError):
        await service.assign_custom_role(principal(admin), member.id, "missing")


async def test_list_pending_members(db, admin, make_user):
    await make_user("active")
    pending = await make_user("waiting", role=UserRole.PENDING)

    users = await AdminService(db).list_pending_members(principal(admin))
    assert [user.id for user in users] == [pending.id]


async def test_approve_project_toggles_flag(db, admin, make_user, make_project):
    owner = await make_user("ada")
    project = await make_project(owner)
    service = AdminService(db)

    assert (await service.approve_project(principal(admin), project.id, True)).is_approved
    assert not (await service.approve_project(principal(admin), project.id, False)).is_approved


async def test_project_workflow_requires_manage_projects(db, make_role, make_user, make_project):
    moderator = await make_user("mod", custom_role=await make_role("Members only", ["MANAGE_MEMBERS"]))
    project = await make_project(await make_user("ada"))

    with pytest.raises(ForbiddenError):
        await AdminService(db).approve_project(principal(moderator), project.id, True)
    with pytest.raises(ForbiddenError):
        await AdminService(db).delete_project(principal(moderator), project.id)


async def test_delete_project_removes_tag_links(db, admin, make_user, make_project):
    project = await make_project(await make_user("ada"))
    project.tags = [Tag(name="python"), Tag(name="web")]
    await db.commit()

    await AdminService(db).delete_project(principal(admin), project.id)

    assert await db.get(Project, project.id) is None
    links = (await db.execute(select(project_tags))).all()
    assert links == []
    tags = (await db.execute(select(Tag))).scalars().all()
    assert {tag.name for tag in tags} == {"python", "web"}


async def test_delete_unknown_project(db, admin):
    with pytest.raises(NotFoundError):
        await AdminService(db).delete_project(principal(admin), "missing")
