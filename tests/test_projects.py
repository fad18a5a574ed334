"""Project API tests."""

from projecthub.models.activity import Activity
from projecthub.models.project import Project, ProjectMember
from projecthub.models.task import Task


def _create_project(client, headers, **fields):
    body = {"name": "Website Redesign", **fields}
    response = client.post("/api/v1/projects", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_project(client, auth_headers):
    """Test creating a project with defaults."""
    data = _create_project(client, auth_headers)
    assert data["name"] == "Website Redesign"
    assert data["description"] == ""
    assert data["status"] == "Planning"
    assert data["tags"] == []
    assert data["owner_id"] == auth_headers.user_id
    assert data["members"] == [auth_headers.user_id]


def test_create_project_with_members(client, auth_headers, other_headers):
    """Test the owner is always included alongside listed members."""
    data = _create_project(
        client,
        auth_headers,
        description="Q3 refresh",
        status="In Progress",
        start_date="2026-01-01",
        end_date="2026-03-31",
        members=[other_headers.user_id],
        tags=["web", "design"],
    )
    assert data["status"] == "In Progress"
    assert data["start_date"] == "2026-01-01"
    assert data["tags"] == ["web", "design"]
    assert data["members"] == sorted([auth_headers.user_id, other_headers.user_id])


def test_create_project_unknown_member(client, db, auth_headers):
    """Test unknown member ids are rejected and nothing is stored."""
    response = client.post(
        "/api/v1/projects",
        json={"name": "Ghosts", "members": [424242]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Unknown member ids: [424242]"}
    assert db.query(Project).count() == 0


def test_create_project_invalid_status(client, auth_headers):
    """Test unknown statuses fail validation."""
    response = client.post(
        "/api/v1/projects", json={"name": "Bad", "status": "Paused"}, headers=auth_headers
    )
    assert response.status_code == 422


def test_create_project_logs_activity(client, db, auth_headers):
    """Test creation is recorded in the activity log."""
    _create_project(client, auth_headers)

    activity = db.query(Activity).one()
    assert activity.type == "project"
    assert activity.action == "created"
    assert activity.target_type == "Project"
    assert activity.target_name == "Website Redesign"
    assert activity.actor_id == auth_headers.user_id
    assert activity.actor_name == "Test User"


def test_list_projects_scoped_and_newest_first(client, auth_headers, other_headers):
    """Test users see their own and shared projects only."""
    first = _create_project(client, auth_headers, name="First")
    second = _create_project(client, auth_headers, name="Second")
    shared = _create_project(client, other_headers, name="Shared", members=[auth_headers.user_id])
    _create_project(client, other_headers, name="Private")

    response = client.get("/api/v1/projects", headers=auth_headers)
    assert response.status_code == 200
    ids = [p["id"] for p in response.json()]
    assert ids == [shared["id"], second["id"], first["id"]]


def test_get_project(client, auth_headers):
    """Test getting a specific project."""
    project = _create_project(client, auth_headers)

    response = client.get(f"/api/v1/projects/{project['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Website Redesign"


def test_get_project_without_access(client, auth_headers, other_headers):
    """Test other users' projects look like they do not exist."""
    project = _create_project(client, auth_headers)

    response = client.get(f"/api/v1/projects/{project['id']}", headers=other_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Project not found"}


def test_update_project_partial(client, auth_headers):
    """Test only fields present in the request change."""
    project = _create_project(client, auth_headers, description="Keep me", tags=["a"])

    response = client.put(
        f"/api/v1/projects/{project['id']}",
        json={"status": "Completed"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "Completed"
    assert data["name"] == "Website Redesign"
    assert data["description"] == "Keep me"
    assert data["tags"] == ["a"]


def test_update_project_members(client, db, auth_headers, other_headers, make_user):
    """Test replacing the member list keeps the owner."""
    third = make_user("third@example.com", name="Third")
    project = _create_project(client, auth_headers, members=[other_headers.user_id])

    response = client.put(
        f"/api/v1/projects/{project['id']}",
        json={"members": [third.user_id]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["members"] == sorted([auth_headers.user_id, third.user_id])
    assert db.query(ProjectMember).filter(ProjectMember.project_id == project["id"]).count() == 2


def test_member_can_update(client, auth_headers, other_headers):
    """Test members may edit a shared project."""
    project = _create_project(client, auth_headers, members=[other_headers.user_id])

    response = client.put(
        f"/api/v1/projects/{project['id']}",
        json={"name": "Renamed"},
        headers=other_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"


def test_update_logs_activity(client, db, auth_headers):
    """Test updates are recorded with the new name."""
    project = _create_project(client, auth_headers)
    client.put(f"/api/v1/projects/{project['id']}", json={"name": "New"}, headers=auth_headers)

    actions = [(a.action, a.target_name) for a in db.query(Activity).order_by(Activity.id)]
    assert actions == [("created", "Website Redesign"), ("updated", "New")]


def test_delete_project_cascades_tasks(client, db, auth_headers):
    """Test deleting a project removes its tasks and memberships."""
    project = _create_project(client, auth_headers)
    client.post(
        f"/api/v1/tasks/project/{project['id']}", json={"title": "Task"}, headers=auth_headers
    )

    response = client.delete(f"/api/v1/projects/{project['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Project deleted successfully"}

    assert db.query(Project).count() == 0
    assert db.query(Task).count() == 0
    assert db.query(ProjectMember).count() == 0
    assert db.query(Activity).order_by(Activity.id.desc()).first().action == "deleted"


def test_delete_project_member_forbidden(client, db, auth_headers, other_headers):
    """Test only the owner can delete a project."""
    project = _create_project(client, auth_headers, members=[other_headers.user_id])

    response = client.delete(f"/api/v1/projects/{project['id']}", headers=other_headers)
    assert response.status_code == 403
    assert response.json() == {"message": "Unauthorized to delete this project"}
    assert db.query(Project).count() == 1


def test_delete_project_not_found(client, auth_headers):
    """Test deleting a missing project."""
    response = client.delete("/api/v1/projects/99999", headers=auth_headers)
    assert response.status_code == 404
