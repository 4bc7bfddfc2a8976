"""End-to-end tests through the HTTP surface."""
import uuid

from conftest import DEFAULT_PASSWORD, login, make_task, register
from taskboard.models import Project, User


def create_project(client, headers, title="Apollo"):
    response = client.post("/api/projects", json={"title": title}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_task(client, headers, project_id, title="First task", status="todo"):
    response = client.post(
        "/api/tasks",
        json={"title": title, "status": status, "projectId": project_id},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Server is running"
    assert body["database"] == "connected"


def test_register_returns_public_projection(client, publisher):
    data = register(client, "a@x.com", name="Alice")

    assert data["email"] == "a@x.com"
    assert data["name"] == "Alice"
    assert data["status"] == "active"
    assert "password" not in data
    assert "deletedAt" not in data
    assert publisher.types() == ["user.registered"]


def test_register_duplicate_email_conflicts(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "another-pass"})

    assert response.status_code == 409
    assert response.json()["success"] is False


def test_register_validation_errors_use_envelope(client):
    response = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"email", "password"}


def test_login_sets_http_only_cookie_and_cookie_authenticates(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    assert response.json()["data"]["token"]
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("token=")
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert "max-age=604800" in set_cookie

    me = client.get("/api/users/me")
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "a@x.com"


def test_logout_clears_cookie(client):
    register(client, "a@x.com")
    client.post("/api/auth/login", json={"email": "a@x.com", "password": DEFAULT_PASSWORD})

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logout successful"}
    assert client.get("/api/users/me").status_code == 401


def test_login_with_wrong_password(client):
    register(client, "a@x.com")

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_suspended_user_cannot_log_in(client, db):
    data = register(client, "a@x.com")
    user = db.get(User, uuid.UUID(data["id"]))
    user.status = "suspended"
    db.commit()

    response = client.post("/api/auth/login", json={"email": "a@x.com", "password": DEFAULT_PASSWORD})

    assert response.status_code == 403


def test_protected_route_without_token(client):
    response = client.get("/api/users")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required"}


def test_me_hides_password_and_soft_delete_marker(client):
    register(client, "a@x.com", name="Alice")
    headers = login(client, "a@x.com")

    data = client.get("/api/users/me", headers=headers).json()["data"]

    assert data["name"] == "Alice"
    assert "password" not in data
    assert "deletedAt" not in data


def test_update_profile_changes_only_name(client):
    register(client, "a@x.com", name="Alice")
    headers = login(client, "a@x.com")

    response = client.put("/api/users/me", json={"name": "Alicia", "email": "evil@x.com"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Alicia"
    assert response.json()["data"]["email"] == "a@x.com"


def test_change_password_revokes_existing_tokens(client):
    register(client, "a@x.com")
    headers = login(client, "a@x.com")

    response = client.put(
        "/api/users/me/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "brand-new-pass"},
        headers=headers,
    )

    assert response.status_code == 200
    assert client.get("/api/users/me", headers=headers).status_code == 401
    new_headers = login(client, "a@x.com", "brand-new-pass")
    assert client.get("/api/users/me", headers=new_headers).status_code == 200


def test_change_password_with_wrong_current_password(client):
    register(client, "a@x.com")
    headers = login(client, "a@x.com")

    response = client.put(
        "/api/users/me/change-password",
        json={"currentPassword": "not-it", "newPassword": "brand-new-pass"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Current password is incorrect"


def test_admin_user_crud(client):
    register(client, "admin@x.com")
    headers = login(client, "admin@x.com")

    created = client.post(
        "/api/users", json={"email": "b@x.com", "password": "password123", "name": "Bob"}, headers=headers
    )
    assert created.status_code == 201
    user_id = created.json()["data"]["id"]

    assert client.get(f"/api/users/{user_id}", headers=headers).json()["data"]["name"] == "Bob"

    conflict = client.put(f"/api/users/{user_id}", json={"email": "admin@x.com"}, headers=headers)
    assert conflict.status_code == 409

    listing = client.get("/api/users", headers=headers).json()["data"]
    assert {u["email"] for u in listing} == {"admin@x.com", "b@x.com"}

    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 404
    assert client.get(f"/api/users/{user_id}", headers=headers).status_code == 404


def test_user_id_must_be_a_uuid(client):
    register(client, "a@x.com")
    headers = login(client, "a@x.com")

    response = client.get("/api/users/not-a-uuid", headers=headers)

    assert response.status_code == 400


def test_owner_updates_task_and_other_user_is_forbidden(client):
    register(client, "a@x.com")
    register(client, "b@x.com")
    owner = login(client, "a@x.com")
    other = login(client, "b@x.com")

    project = create_project(client, owner, "P1")
    task = create_task(client, owner, project["id"], "T1", status="todo")
    assert task["status"] == "todo"
    assert task["assigneeId"] is None

    response = client.put(f"/api/tasks/{task['id']}", json={"status": "doing"}, headers=owner)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "doing"
    assert data["project"]["ownerId"] == project["ownerId"]

    forbidden = client.put(f"/api/tasks/{task['id']}", json={"status": "done"}, headers=other)
    assert forbidden.status_code == 403
    assert forbidden.json()["success"] is False


def test_assignee_can_view_but_not_update(client):
    register(client, "a@x.com")
    assignee = register(client, "b@x.com", name="Bob")
    owner = login(client, "a@x.com")
    bob = login(client, "b@x.com")
    project = create_project(client, owner)
    task = create_task(client, owner, project["id"])

    assigned = client.put(f"/api/tasks/{task['id']}", json={"assigneeId": assignee["id"]}, headers=owner)
    assert assigned.status_code == 200
    assert assigned.json()["data"]["assignee"] == {"id": assignee["id"], "email": "b@x.com", "name": "Bob"}

    assert client.get(f"/api/tasks/{task['id']}", headers=bob).status_code == 200
    assert client.put(f"/api/tasks/{task['id']}", json={"title": "Mine now"}, headers=bob).status_code == 403


def test_assigning_unknown_user(client):
    register(client, "a@x.com")
    owner = login(client, "a@x.com")
    project = create_project(client, owner)
    task = create_task(client, owner, project["id"])

    response = client.put(f"/api/tasks/{task['id']}", json={"assigneeId": str(uuid.uuid4())}, headers=owner)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Assignee not found"}


def test_create_task_with_unknown_status_is_rejected(client):
    register(client, "a@x.com")
    owner = login(client, "a@x.com")
    project = create_project(client, owner)

    response = client.post(
        "/api/tasks",
        json={"title": "Title", "status": "blocked", "projectId": project["id"]},
        headers=owner,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"


def test_create_task_in_someone_elses_project(client):
    register(client, "a@x.com")
    register(client, "b@x.com")
    owner = login(client, "a@x.com")
    other = login(client, "b@x.com")
    project = create_project(client, owner)

    response = client.post(
        "/api/tasks", json={"title": "Sneaky", "status": "todo", "projectId": project["id"]}, headers=other
    )

    assert response.status_code == 403


def test_list_tasks_paginates(client, db):
    register(client, "a@x.com")
    owner = login(client, "a@x.com")
    project_data = create_project(client, owner)
    project = db.get(Project, uuid.UUID(project_data["id"]))
    for i in range(25):
        make_task(db, project, title=f"Task {i}")

    response = client.get(
        f"/api/tasks/by-project/{project_data['id']}", params={"page": 3, "limit": 10}, headers=owner
    )

    assert response.status_code == 200
    page = response.json()["data"]
    assert len(page["data"]) == 5
    assert page["pagination"] == {"page": 3, "limit": 10, "total": 25, "totalPages": 3}


def test_list_tasks_of_foreign_and_unknown_projects(client):
    register(client, "a@x.com")
    register(client, "b@x.com")
    owner = login(client, "a@x.com")
    other = login(client, "b@x.com")
    project = create_project(client, owner)

    empty = client.get(f"/api/tasks/by-project/{project['id']}", headers=owner)
    assert empty.status_code == 200
    assert empty.json()["data"]["data"] == []

    assert client.get(f"/api/tasks/by-project/{project['id']}", headers=other).status_code == 403
    assert client.get(f"/api/tasks/by-project/{uuid.uuid4()}", headers=owner).status_code == 404


def test_list_tasks_rejects_oversized_limit(client):
    register(client, "a@x.com")
    owner = login(client, "a@x.com")
    project = create_project(client, owner)

    response = client.get(f"/api/tasks/by-project/{project['id']}", params={"limit": 1000}, headers=owner)

    assert response.status_code == 400


def test_delete_task_twice(client):
    register(client, "a@x.com")
    owner = login(client, "a@x.com")
    project = create_project(client, owner)
    task = create_task(client, owner, project["id"])

    assert client.delete(f"/api/tasks/{task['id']}", headers=owner).status_code == 200
    assert client.delete(f"/api/tasks/{task['id']}", headers=owner).status_code == 404


def test_password_longer_than_bcrypt_limit_is_rejected(client):
    response = client.post("/api/auth/register", json={"email": "a@x.com", "password": "p" * 73})

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["password"]


def test_change_password_rejects_overlong_new_password(client):
    register(client, "a@x.com")
    headers = login(client, "a@x.com")

    response = client.put(
        "/api/users/me/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "p" * 73},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "newPassword"
