"""
Authorization engine: effective permissions of built-in and custom roles.
"""
import itertools
from types import SimpleNamespace

import pytest

from codeclub.core.errors import ForbiddenError
from codeclub.features.permissions.dependencies import (
    effective_permissions,
    ensure_permission,
    has_any_permission,
    has_permission,
)
from codeclub.features.permissions.models import (
    ALL_PERMISSIONS,
    Permission,
    Principal,
    UserRole,
    parse_permissions,
)


CUSTOM_SETS = [
    frozenset(),
    frozenset({Permission.VIEW_DASHBOARD}),
    frozenset({Permission.MANAGE_MEMBERS, Permission.MANAGE_PROJECTS}),
    ALL_PERMISSIONS,
]


@pytest.mark.parametrize("role,custom", list(itertools.product(UserRole, CUSTOM_SETS)))
def test_has_permission_truth_table(role, custom):
    principal = Principal(id="u1", role=role, is_active=True, custom_role_permissions=custom)
    for permission in Permission:
        expected = role == UserRole.ADMIN or permission in custom
        assert has_permission(principal, permission) is expected


def test_builtin_member_and_pending_grant_nothing():
    for role in (UserRole.MEMBER, UserRole.PENDING):
        principal = Principal(id="u1", role=role, is_active=True)
        assert effective_permissions(principal) == frozenset()


def test_admin_has_everything_without_custom_role():
    principal = Principal(id="u1", role=UserRole.ADMIN, is_active=True)
    assert effective_permissions(principal) == ALL_PERMISSIONS
    assert principal.is_admin


def test_has_any_permission():
    principal = Principal(
        id="u1",
        role=UserRole.MEMBER,
        is_active=True,
        custom_role_permissions=frozenset({Permission.MANAGE_EVENTS}),
    )
    assert has_any_permission(principal, [Permission.MANAGE_TAGS, Permission.MANAGE_EVENTS])
    assert not has_any_permission(principal, [Permission.MANAGE_TAGS, Permission.MANAGE_ROLES])


def test_ensure_permission_refuses_missing_permission():
    principal = Principal(id="u1", role=UserRole.MEMBER, is_active=True)
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_permission(principal, Permission.MANAGE_ROLES)
    assert "MANAGE_ROLES" in exc_info.value.message


def test_ensure_permission_refuses_inactive_account_with_custom_role():
    principal = Principal(
        id="u1",
        role=UserRole.PENDING,
        is_active=False,
        custom_role_permissions=frozenset({Permission.MANAGE_MEMBERS}),
    )
    assert has_permission(principal, Permission.MANAGE_MEMBERS)
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_permission(principal, Permission.MANAGE_MEMBERS)
    assert "not active" in exc_info.value.message


def test_ensure_permission_allows_granted():
    principal = Principal(
        id="u1",
        role=UserRole.MEMBER,
        is_active=True,
        custom_role_permissions=frozenset({Permission.MANAGE_PROJECTS}),
    )
    ensure_permission(principal, Permission.MANAGE_PROJECTS)


def test_parse_permissions_dedupes_in_declaration_order():
    parsed = parse_permissions(["MANAGE_ROLES", "VIEW_DASHBOARD", "MANAGE_ROLES"])
    assert parsed == [Permission.VIEW_DASHBOARD, Permission.MANAGE_ROLES]


def test_parse_permissions_rejects_unknown():
    with pytest.raises(ValueError):
        parse_permissions(["VIEW_DASHBOARD", "DELETE_EVERYTHING"])


def test_principal_from_user():
    user = SimpleNamespace(
        id="u1",
        role="MEMBER",
        is_active=True,
        is_lead=True,
        custom_role=SimpleNamespace(permissions=["MANAGE_TAGS"]),
    )
    principal = Principal.from_user(user)
    assert principal.role == UserRole.MEMBER
    assert principal.is_lead
    assert principal.custom_role_permissions == frozenset({Permission.MANAGE_TAGS})


def test_principal_from_user_without_custom_role():
    user = SimpleNamespace(id="u1", role=UserRole.PENDING, is_active=False, is_lead=False, custom_role=None)
    assert Principal.from_user(user).custom_role_permissions == frozenset()
