from app.models.enums import ProjectRole

def create_task(client, actor, project_id: str, **fields) -> dict:
    r = client.post("/tasks", json={"title": "task", "project_id": project_id, **fields}, headers=actor.headers)
    assert r.status_code == 201, r.text
    return r.json()

def test_create_defaults(client, team):
    project_id, owner, *_ = team

    task = create_task(client, owner, project_id, title="  write docs  ")
    assert task["title"] == "write docs"
    assert task["status"] == "TODO"
    assert task["priority"] == "MEDIUM"
    assert task["assignee_id"] is None
    assert task["created_by"]["id"] == owner.id
    assert task["project"] == {"id": project_id, "name": "team project"}

def test_blank_title_is_rejected(client, team):
    project_id, owner, *_ = team
    r = client.post("/tasks", json={"title": " ", "project_id": project_id}, headers=owner.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "validation_error"

def test_assignee_must_be_a_member(client, make_account, make_project):
    u1 = make_account("u1")
    u2 = make_account("u2")
    u3 = make_account("u3")
    alpha = make_project(u1, "Alpha", {u2: ProjectRole.member})

    r = client.post(
        "/tasks", json={"title": "t", "project_id": alpha, "assignee_id": u3.id}, headers=u2.headers
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid_assignee"

    task = create_task(client, u2, alpha, title="t", assignee_id=u2.id)
    assert task["assignee"]["id"] == u2.id

def test_assignee_can_move_own_task(client, make_account, make_project):
    u1 = make_account("u1")
    u2 = make_account("u2")
    u4 = make_account("u4")
    alpha = make_project(u1, "Alpha", {u2: ProjectRole.member, u4: ProjectRole.member})
    task = create_task(client, u1, alpha, assignee_id=u2.id)

    r = client.patch(f"/tasks/{task['id']}/status", json={"status": "DONE"}, headers=u2.headers)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "DONE"

    r = client.patch(f"/tasks/{task['id']}/status", json={"status": "IN_PROGRESS"}, headers=u4.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "insufficient_role"

def test_status_is_free_form(client, team):
    project_id, owner, *_ = team
    task = create_task(client, owner, project_id)

    for status in ("DONE", "TODO", "IN_REVIEW"):
        r = client.patch(f"/tasks/{task['id']}/status", json={"status": status}, headers=owner.headers)
        assert r.status_code == 200
        assert r.json()["status"] == status

    r = client.patch(f"/tasks/{task['id']}/status", json={"status": "ARCHIVED"}, headers=owner.headers)
    assert r.status_code == 422

def test_update_fields(client, team):
    project_id, owner, admin, member, outsider = team
    task = create_task(client, member, project_id, assignee_id=member.id)

    # the assignee may edit; other plain members may not
    r = client.patch(
        f"/tasks/{task['id']}",
        json={"title": "renamed", "priority": "URGENT", "description": "more"},
        headers=member.headers,
    )
    assert r.status_code == 200, r.text
    assert (r.json()["title"], r.json()["priority"], r.json()["description"]) == ("renamed", "URGENT", "more")

    r = client.patch(f"/tasks/{task['id']}", json={"assignee_id": outsider.id}, headers=admin.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid_assignee"

    # explicit null unassigns
    r = client.patch(f"/tasks/{task['id']}", json={"assignee_id": None}, headers=admin.headers)
    assert r.status_code == 200
    assert r.json()["assignee_id"] is None

    r = client.patch(f"/tasks/{task['id']}", json={"title": "mine now"}, headers=member.headers)
    assert r.status_code == 403

    r = client.patch(f"/tasks/{task['id']}", json={"title": ""}, headers=admin.headers)
    assert r.status_code == 400

def test_assign(client, team):
    project_id, owner, admin, member, outsider = team
    task = create_task(client, member, project_id)

    r = client.patch(f"/tasks/{task['id']}/assign", json={"assignee_id": member.id}, headers=member.headers)
    assert r.status_code == 403

    r = client.patch(f"/tasks/{task['id']}/assign", json={"assignee_id": outsider.id}, headers=admin.headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid_assignee"

    r = client.patch(f"/tasks/{task['id']}/assign", json={"assignee_id": member.id}, headers=admin.headers)
    assert r.status_code == 200
    assert r.json()["assignee"]["id"] == member.id

def test_delete(client, team):
    project_id, owner, admin, member, _ = team
    task = create_task(client, member, project_id)

    r = client.delete(f"/tasks/{task['id']}", headers=member.headers)
    assert r.status_code == 403

    r = client.delete(f"/tasks/{task['id']}", headers=admin.headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True}

    assert client.get(f"/tasks/{task['id']}", headers=owner.headers).status_code == 404
    assert client.delete(f"/tasks/{task['id']}", headers=admin.headers).status_code == 404

def test_non_member_cannot_touch_tasks(client, team):
    project_id, owner, _, _, outsider = team
    task = create_task(client, owner, project_id)

    r = client.get(f"/tasks/{task['id']}", headers=outsider.headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "not_a_member"

    r = client.post("/tasks", json={"title": "t", "project_id": project_id}, headers=outsider.headers)
    assert r.json()["detail"] == "not_a_member"

    r = client.get(f"/tasks/project/{project_id}", headers=outsider.headers)
    assert r.status_code == 403

def test_deleted_project_hides_its_tasks(client, make_account, make_project):
    u1 = make_account("u1")
    u2 = make_account("u2")
    alpha = make_project(u1, "Alpha", {u2: ProjectRole.member})
    task = create_task(client, u1, alpha, title="secret", assignee_id=u2.id)

    assert client.delete(f"/projects/{alpha}", headers=u1.headers).status_code == 200

    r = client.get(f"/projects/{alpha}", headers=u1.headers)
    assert r.status_code == 404

    r = client.get(f"/tasks/{task['id']}", headers=u2.headers)
    assert r.status_code == 404
    assert "secret" not in r.text

    for method, url, body in [
        ("patch", f"/tasks/{task['id']}", {"title": "x"}),
        ("patch", f"/tasks/{task['id']}/status", {"status": "DONE"}),
        ("patch", f"/tasks/{task['id']}/assign", {"assignee_id": u2.id}),
        ("delete", f"/tasks/{task['id']}", None),
    ]:
        assert client.request(method, url, json=body, headers=u1.headers).status_code == 404

    r = client.post("/tasks", json={"title": "late", "project_id": alpha}, headers=u1.headers)
    assert r.status_code == 404

    r = client.get("/tasks", headers=u2.headers)
    assert r.json()["meta"]["total"] == 0

def test_removed_member_is_unassigned(client, team):
    project_id, owner, admin, member, _ = team
    task = create_task(client, owner, project_id, assignee_id=member.id)

    r = client.delete(f"/projects/{project_id}/members/{member.id}", headers=owner.headers)
    assert r.status_code == 200

    r = client.get(f"/tasks/{task['id']}", headers=owner.headers)
    assert r.json()["assignee_id"] is None

def test_project_task_list(client, team):
    project_id, owner, admin, member, _ = team
    ids = {create_task(client, owner, project_id, title=f"t{i}")["id"] for i in range(3)}
    deleted = create_task(client, owner, project_id, title="gone")["id"]
    client.delete(f"/tasks/{deleted}", headers=owner.headers)

    r = client.get(f"/tasks/project/{project_id}", headers=member.headers)
    assert r.status_code == 200
    assert {t["id"] for t in r.json()} == ids

    r = client.get(f"/projects/{project_id}", headers=member.headers)
    assert r.json()["counts"]["tasks"] == 3

def test_my_tasks_filters_and_pagination(client, team, make_project):
    project_id, owner, admin, member, _ = team
    other = make_project(member, "side project")

    create_task(client, owner, project_id, title="a", assignee_id=member.id, priority="HIGH")
    create_task(client, owner, project_id, title="b", assignee_id=member.id, priority="LOW")
    create_task(client, member, other, title="c")
    create_task(client, owner, project_id, title="not mine")

    r = client.get("/tasks", headers=member.headers)
    assert r.status_code == 200
    assert {t["title"] for t in r.json()["data"]} == {"a", "b", "c"}

    r = client.get("/tasks", params={"priority": "HIGH"}, headers=member.headers)
    assert [t["title"] for t in r.json()["data"]] == ["a"]

    r = client.get("/tasks", params={"project_id": other}, headers=member.headers)
    assert [t["title"] for t in r.json()["data"]] == ["c"]

    r = client.get("/tasks", params={"assignee_id": member.id, "status": "TODO"}, headers=member.headers)
    assert {t["title"] for t in r.json()["data"]} == {"a", "b"}

    r = client.get("/tasks", params={"limit": 2, "page": 2}, headers=member.headers)
    body = r.json()
    assert len(body["data"]) == 1
    assert body["meta"]["total"] == 3
    assert body["meta"]["has_next"] is False
