"""
Public member listings and own-profile editing.
"""
from codeclub.features.permissions.models import UserRole

from conftest import auth_headers


async def test_only_active_members_are_listed(client, make_user):
    active = await make_user("ada")
    pending = await make_user("newbie", role=UserRole.PENDING)

    res = await client.get("/members/")
    assert [member["userId"] for member in res.json()] == [active.id]

    res = await client.get(f"/members/user/{pending.id}")
    assert res.status_code == 404
    assert (await client.get(f"/members/user/{active.id}")).status_code == 200


async def test_public_profile_hides_unapproved_projects(client, make_user, make_project):
    owner = await make_user("ada")
    await make_project(owner, title="Live", is_approved=True)
    await make_project(owner, title="Draft")

    public = (await client.get(f"/members/user/{owner.id}")).json()
    assert [project["title"] for project in public["projects"]] == ["Live"]

    own = (await client.get("/members/profile", headers=auth_headers(owner))).json()
    assert {project["title"] for project in own["projects"]} == {"Live", "Draft"}


async def test_update_own_profile(client, make_user):
    member = await make_user("ada")
    res = await client.put(
        "/members/profile",
        json={"bio": "Rustacean", "roleTitle": "Backend"},
        headers=auth_headers(member),
    )
    assert res.status_code == 200
    assert res.json()["bio"] == "Rustacean"
    assert res.json()["roleTitle"] == "Backend"
    assert res.json()["fullName"] == "Ada"


async def test_pending_user_cannot_edit_profile(client, make_user):
    pending = await make_user("newbie", role=UserRole.PENDING)
    res = await client.put("/members/profile", json={"bio": "hi"}, headers=auth_headers(pending))
    assert res.status_code == 403


async def test_skills_on_profile_and_filter(client, admin, make_user):
    member = await make_user("ada")
    await make_user("bob")

    created = await client.post("/skills/", json={"name": "Python", "category": "Language"}, headers=auth_headers(admin))
    assert created.status_code == 201
    skill_id = created.json()["id"]

    res = await client.post("/members/skills", json={"skillIds": [skill_id]}, headers=auth_headers(member))
    assert [skill["name"] for skill in res.json()["skills"]] == ["Python"]

    res = await client.get("/members/", params={"skillIds": skill_id})
    assert [item["userId"] for item in res.json()] == [member.id]

    res = await client.delete(f"/members/skills/{skill_id}", headers=auth_headers(member))
    assert res.json()["skills"] == []


async def test_unknown_skill_rejected(client, make_user):
    member = await make_user("ada")
    res = await client.post("/members/skills", json={"skillIds": ["missing"]}, headers=auth_headers(member))
    assert res.status_code == 404


async def test_skill_catalog_requires_manage_skills(client, make_user):
    member = await make_user("ada")
    res = await client.post("/skills/", json={"name": "Go"}, headers=auth_headers(member))
    assert res.status_code == 403


async def test_duplicate_skill_conflicts(client, admin):
    headers = auth_headers(admin)
    await client.post("/skills/", json={"name": "Go"}, headers=headers)
    res = await client.post("/skills/", json={"name": "Go"}, headers=headers)
    assert res.status_code == 409


async def test_leads_listing(client, make_user):
    await make_user("lead", is_lead=True)
    await make_user("plain")
    await make_user("pending-lead", role=UserRole.PENDING, is_lead=True)

    res = await client.get("/members/leads")
    assert [member["user"]["username"] for member in res.json()] == ["lead"]
