import uuid

from app.models.enums import ProjectRole

def members_by_user(project: dict) -> dict[str, str]:
    return {m["user_id"]: m["role"] for m in project["members"]}

def test_create_makes_caller_the_single_owner(client, make_account):
    u1 = make_account("u1")

    r = client.post("/projects", json={"name": "  Alpha  ", "description": "first"}, headers=u1.headers)
    assert r.status_code == 201, r.text
    body = r.json()

    assert body["name"] == "Alpha"
    assert body["owner_id"] == u1.id
    assert body["owner"]["id"] == u1.id
    assert members_by_user(body) == {u1.id: "OWNER"}
    assert body["counts"] == {"tasks": 0, "members": 1}

def test_blank_name_is_rejected(client, make_account):
    u1 = make_account("u1")
    r = client.post("/projects", json={"name": "   "}, headers=u1.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "validation_error"

def test_requires_authentication(client):
    r = client.get("/projects")
    assert r.status_code == 401
    assert r.json()["detail"] == "unauthenticated"

    r = client.get("/projects", headers={"authorization": "bearer not-a-jwt"})
    assert r.status_code == 401

def test_scenario_promotion_unlocks_update(client, make_account, make_project):
    u1 = make_account("u1")
    u2 = make_account("u2")
    alpha = make_project(u1, "Alpha", {u2: ProjectRole.member})

    r = client.get(f"/projects/{alpha}", headers=u1.headers)
    assert r.json()["counts"]["members"] == 2

    r = client.patch(f"/projects/{alpha}", json={"name": "Alpha 2"}, headers=u2.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "insufficient_role"

    r = client.patch(f"/projects/{alpha}/members/{u2.id}/role", json={"role": "ADMIN"}, headers=u1.headers)
    assert r.status_code == 200, r.text
    assert members_by_user(r.json())[u2.id] == "ADMIN"

    r = client.patch(f"/projects/{alpha}", json={"name": "Alpha 2"}, headers=u2.headers)
    assert r.status_code == 200, r.text
    assert r.json()["name"] == "Alpha 2"

def test_owner_cannot_remove_themselves(client, make_account, make_project):
    u1 = make_account("u1")
    alpha = make_project(u1, "Alpha")

    r = client.delete(f"/projects/{alpha}/members/{u1.id}", headers=u1.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "owner_protected"

def test_owner_is_protected_from_every_role(client, team):
    project_id, owner, admin, member, _ = team

    for actor in (owner, admin, member):
        r = client.delete(f"/projects/{project_id}/members/{owner.id}", headers=actor.headers)
        assert r.json()["detail"] == "owner_protected", actor
        r = client.patch(
            f"/projects/{project_id}/members/{owner.id}/role", json={"role": "MEMBER"}, headers=actor.headers
        )
        assert r.json()["detail"] == "owner_protected", actor

    r = client.get(f"/projects/{project_id}", headers=owner.headers)
    assert members_by_user(r.json())[owner.id] == "OWNER"

def test_owner_role_cannot_be_granted(client, team):
    project_id, owner, admin, _, outsider = team

    r = client.patch(f"/projects/{project_id}/members/{admin.id}/role", json={"role": "OWNER"}, headers=owner.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "owner_protected"

    r = client.post(
        f"/projects/{project_id}/members", json={"user_id": outsider.id, "role": "OWNER"}, headers=owner.headers
    )
    assert r.status_code == 400

    owners = [m for m in client.get(f"/projects/{project_id}", headers=owner.headers).json()["members"] if m["role"] == "OWNER"]
    assert [m["user_id"] for m in owners] == [owner.id]

def test_add_member_errors(client, team):
    project_id, owner, admin, member, outsider = team

    r = client.post(f"/projects/{project_id}/members", json={"user_id": member.id}, headers=owner.headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "already_member"

    r = client.post(f"/projects/{project_id}/members", json={"user_id": str(uuid.uuid4())}, headers=owner.headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "target_user_not_found"

    r = client.post(f"/projects/{project_id}/members", json={"user_id": outsider.id}, headers=member.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "insufficient_role"

    r = client.post(f"/projects/{project_id}/members", json={"user_id": outsider.id}, headers=admin.headers)
    assert r.status_code == 200
    assert members_by_user(r.json())[outsider.id] == "MEMBER"

def test_remove_member(client, team):
    project_id, owner, admin, member, outsider = team

    r = client.delete(f"/projects/{project_id}/members/{outsider.id}", headers=admin.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "not_a_member"

    r = client.delete(f"/projects/{project_id}/members/{member.id}", headers=admin.headers)
    assert r.status_code == 200, r.text
    assert member.id not in members_by_user(r.json())

    # the removed member loses access immediately
    r = client.get(f"/projects/{project_id}", headers=member.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "not_a_member"

def test_non_member_cannot_see_project(client, team):
    project_id, *_, outsider = team
    r = client.get(f"/projects/{project_id}", headers=outsider.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "not_a_member"

def test_only_owner_can_delete(client, team):
    project_id, owner, admin, member, _ = team

    for actor in (admin, member):
        r = client.delete(f"/projects/{project_id}", headers=actor.headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "owner_only"

    r = client.delete(f"/projects/{project_id}", headers=owner.headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True}

def test_delete_is_not_repeatable(client, make_account, make_project):
    u1 = make_account("u1")
    alpha = make_project(u1, "Alpha")

    assert client.delete(f"/projects/{alpha}", headers=u1.headers).status_code == 200

    r = client.delete(f"/projects/{alpha}", headers=u1.headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "not_found"

def test_deleted_project_is_unreachable(client, team):
    project_id, owner, admin, member, outsider = team
    assert client.delete(f"/projects/{project_id}", headers=owner.headers).status_code == 200

    calls = [
        ("get", f"/projects/{project_id}", None),
        ("patch", f"/projects/{project_id}", {"name": "revived"}),
        ("post", f"/projects/{project_id}/members", {"user_id": outsider.id}),
        ("delete", f"/projects/{project_id}/members/{member.id}", None),
        ("patch", f"/projects/{project_id}/members/{member.id}/role", {"role": "ADMIN"}),
    ]
    for method, url, body in calls:
        r = client.request(method, url, json=body, headers=owner.headers)
        assert r.status_code == 404, (method, url, r.text)
        assert "team project" not in r.text

    r = client.get("/projects", headers=owner.headers)
    assert r.json()["meta"]["total"] == 0

def test_list_is_scoped_to_membership_and_paginated(client, make_account, make_project):
    u1 = make_account("u1")
    u2 = make_account("u2")
    for i in range(3):
        make_project(u1, f"mine {i}")
    make_project(u2, "theirs")
    shared = make_project(u2, "shared", {u1: ProjectRole.member})

    r = client.get("/projects", params={"page": 1, "limit": 2}, headers=u1.headers)
    assert r.status_code == 200
    body = r.json()
    assert len(body["data"]) == 2
    assert body["meta"] == {
        "page": 1,
        "limit": 2,
        "total": 4,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }
    # list views omit the member roster
    assert body["data"][0]["members"] is None

    r = client.get("/projects", params={"page": 2, "limit": 2}, headers=u1.headers)
    assert r.json()["meta"]["has_prev"] is True

    names = {p["name"] for p in r.json()["data"]} | {p["name"] for p in body["data"]}
    assert names == {"mine 0", "mine 1", "mine 2", "shared"}

    r = client.get("/projects", params={"search": "SHAR"}, headers=u1.headers)
    assert [p["id"] for p in r.json()["data"]] == [shared]

def test_invalid_page_params(client, make_account):
    u1 = make_account("u1")
    assert client.get("/projects", params={"limit": 0}, headers=u1.headers).status_code == 422
    assert client.get("/projects", params={"page": 0}, headers=u1.headers).status_code == 422
