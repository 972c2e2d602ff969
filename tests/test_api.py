from datetime import date, timedelta

import pytest

DUE = date.today() + timedelta(days=21)


@pytest.fixture()
def project(client, user):
    resp = client.post("/api/projects", json={
        "name": "Capstone",
        "description": "Semester project",
        "userId": user.id,
        "dueDate": DUE.isoformat(),
    })
    assert resp.status_code == 201
    return resp.get_json()


@pytest.fixture()
def deliverable(client, project):
    resp = client.post("/api/deliverables", json={"projectId": project["id"], "name": "Build a login UI"})
    assert resp.status_code == 201
    return resp.get_json()


def _add_task(client, deliverable_id, **overrides):
    body = {"deliverableId": deliverable_id, "name": "Sketch screens", "dueDate": DUE.isoformat()}
    body.update(overrides)
    return client.post("/api/tasks", json=body)


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_analyze_rubric(client):
    resp = client.post("/api/analyze-rubric", json={
        "text": "1. Build a login UI\n2. Create backend API\n3. Write final report (20 points)",
    })

    assert resp.status_code == 200
    deliverables = resp.get_json()["deliverables"]
    assert len(deliverables) == 3
    assert deliverables[2] == {"name": "Write final report", "description": None, "points": 20}


@pytest.mark.parametrize("body", [{}, {"text": ""}, {"text": 5}])
def test_analyze_rubric_validation(client, body):
    resp = client.post("/api/analyze-rubric", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["errors"][0]["field"] == "text"


def test_whitespace_rubric_is_invalid_input(client):
    resp = client.post("/api/analyze-rubric", json={"text": "   "})

    assert resp.status_code == 400


def test_non_json_body_is_rejected(client):
    resp = client.post("/api/analyze-rubric", data="text", content_type="text/plain")

    assert resp.status_code == 400


def test_create_user_and_duplicate(client):
    resp = client.post("/api/users", json={"username": "ada", "password": "secret"})
    assert resp.status_code == 201
    assert "password" not in resp.get_json()

    resp = client.post("/api/users", json={"username": "ada", "password": "other"})
    assert resp.status_code == 400


def test_create_and_fetch_project(client, project, user):
    assert project["name"] == "Capstone"
    assert project["userId"] == user.id
    assert project["dueDate"] == DUE.isoformat()

    resp = client.get(f"/api/projects/{project['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["id"] == project["id"]

    resp = client.get(f"/api/projects?userId={user.id}")
    assert [p["id"] for p in resp.get_json()] == [project["id"]]


def test_project_validation_reports_fields(client, user):
    resp = client.post("/api/projects", json={"name": "No date", "userId": user.id})

    assert resp.status_code == 400
    assert {"field": "dueDate", "message": "Field required"} in resp.get_json()["errors"]


def test_project_for_unknown_user_is_404(client):
    resp = client.post("/api/projects", json={"name": "x", "userId": 999, "dueDate": DUE.isoformat()})

    assert resp.status_code == 404


def test_list_projects_requires_user_id(client):
    assert client.get("/api/projects").status_code == 400
    assert client.get("/api/projects?userId=abc").status_code == 400


def test_missing_project_is_404(client):
    assert client.get("/api/projects/999").status_code == 404
    assert client.get("/api/projects/999/details").status_code == 404
    assert client.post("/api/projects/999/generate-timeline").status_code == 404


def test_update_and_delete_project(client, project, deliverable):
    resp = client.put(f"/api/projects/{project['id']}", json={"name": "Renamed"})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "Renamed"
    assert resp.get_json()["description"] == "Semester project"

    resp = client.put(f"/api/projects/{project['id']}", json={"dueDate": None})
    assert resp.status_code == 400

    assert client.delete(f"/api/projects/{project['id']}").status_code == 204
    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    assert client.get(f"/api/projects/{project['id']}/deliverables").get_json() == []


def test_deliverables_and_tasks(client, project, deliverable):
    resp = client.get(f"/api/projects/{project['id']}/deliverables")
    assert [d["name"] for d in resp.get_json()] == ["Build a login UI"]

    resp = _add_task(client, deliverable["id"])
    assert resp.status_code == 201
    task = resp.get_json()
    assert task["priority"] == 1
    assert task["completed"] is False

    resp = client.get(f"/api/deliverables/{deliverable['id']}/tasks")
    assert [t["id"] for t in resp.get_json()] == [task["id"]]


@pytest.mark.parametrize("priority", [0, 4])
def test_task_priority_range(client, deliverable, priority):
    assert _add_task(client, deliverable["id"], priority=priority).status_code == 400


def test_deliverable_for_unknown_project_is_404(client):
    resp = client.post("/api/deliverables", json={"projectId": 999, "name": "x"})

    assert resp.status_code == 404


def test_toggle_task(client, deliverable):
    task = _add_task(client, deliverable["id"]).get_json()

    first = client.patch(f"/api/tasks/{task['id']}/toggle")
    second = client.patch(f"/api/tasks/{task['id']}/toggle")

    assert first.get_json()["completed"] is True
    assert second.get_json()["completed"] is False
    assert client.patch("/api/tasks/999/toggle").status_code == 404


def test_toggle_last_task_completes_deliverable(client, project, deliverable):
    task = _add_task(client, deliverable["id"]).get_json()
    client.patch(f"/api/tasks/{task['id']}/toggle")

    details = client.get(f"/api/projects/{project['id']}/details").get_json()

    assert details["deliverables"][0]["completed"] is True
    assert details["progress"] == {"completed": 1, "total": 1, "percentage": 100}


def test_toggle_deliverable(client, deliverable):
    task = _add_task(client, deliverable["id"]).get_json()

    resp = client.patch(f"/api/deliverables/{deliverable['id']}/toggle")

    assert resp.status_code == 200
    assert resp.get_json()["completed"] is True
    assert resp.get_json()["tasks"][0]["id"] == task["id"]
    assert resp.get_json()["tasks"][0]["completed"] is True


def test_availability_default_and_upsert(client, project):
    resp = client.get(f"/api/projects/{project['id']}/availability")
    assert resp.get_json() == {
        "id": 0, "projectId": project["id"],
        "monday": True, "tuesday": True, "wednesday": True, "thursday": True, "friday": True,
        "saturday": False, "sunday": False, "hoursPerDay": 2,
    }

    resp = client.post("/api/availability", json={"projectId": project["id"], "saturday": True})
    assert resp.status_code == 201
    first = resp.get_json()
    assert first["saturday"] is True
    assert first["hoursPerDay"] == 2

    resp = client.post("/api/availability", json={"projectId": project["id"], "hoursPerDay": 4})
    assert resp.get_json()["id"] == first["id"]
    assert resp.get_json()["saturday"] is False

    resp = client.get(f"/api/projects/{project['id']}/availability")
    assert resp.get_json()["hoursPerDay"] == 4


@pytest.mark.parametrize("hours", [0, 25])
def test_availability_hours_range(client, project, hours):
    resp = client.post("/api/availability", json={"projectId": project["id"], "hoursPerDay": hours})

    assert resp.status_code == 400


def test_generate_timeline(client, project, deliverable):
    resp = client.post(f"/api/projects/{project['id']}/generate-timeline")

    assert resp.status_code == 200
    details = resp.get_json()
    tasks = details["deliverables"][0]["tasks"]
    assert 5 <= len(tasks) <= 7
    for task in tasks:
        due = date.fromisoformat(task["dueDate"])
        assert date.today() <= due <= DUE
        assert due.weekday() < 5
        assert task["description"] == "Part of: Build a login UI"
    assert details["progress"]["total"] == len(tasks)


def test_generate_timeline_skips_deliverables_with_tasks(client, project, deliverable):
    _add_task(client, deliverable["id"])
    client.post("/api/deliverables", json={"projectId": project["id"], "name": "Write final report"})

    details = client.post(f"/api/projects/{project['id']}/generate-timeline").get_json()

    assert len(details["deliverables"][0]["tasks"]) == 1
    assert len(details["deliverables"][1]["tasks"]) >= 5


def test_generate_timeline_rejects_past_due_date(client, user, project):
    client.put(f"/api/projects/{project['id']}", json={"dueDate": date.today().isoformat()})

    resp = client.post(f"/api/projects/{project['id']}/generate-timeline")

    assert resp.status_code == 400
    assert "future" in resp.get_json()["message"]


def test_generate_timeline_rejects_empty_availability(client, project, deliverable):
    days = {day: False for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")}
    client.post("/api/availability", json=dict(days, projectId=project["id"]))

    resp = client.post(f"/api/projects/{project['id']}/generate-timeline")

    assert resp.status_code == 400


def test_progress_and_calendar(client, project, deliverable):
    client.post(f"/api/projects/{project['id']}/generate-timeline")

    progress = client.get(f"/api/projects/{project['id']}/progress").get_json()
    assert progress["completed"] == 0
    assert progress["percentage"] == 0
    assert progress["deliverables"][0]["name"] == "Build a login UI"

    calendar = client.get(f"/api/projects/{project['id']}/calendar").get_json()
    dates = [group["date"] for group in calendar]
    assert dates == sorted(dates)
    assert sum(len(group["tasks"]) for group in calendar) == progress["total"]
    assert calendar[0]["tasks"][0]["deliverableName"] == "Build a login UI"


def test_timeline_preview_from_text(client):
    resp = client.post("/api/timeline/preview", json={
        "text": "1. Build a login UI\n2. Create backend API",
        "dueDate": (date.today() + timedelta(days=10)).isoformat(),
        "availability": {"saturday": True, "sunday": True},
    })

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["daysUntilDue"] == 10
    assert len(data["days"]) == 10
    assert all(day["isAvailable"] for day in data["days"])
    assert sum(len(day["tasks"]) for day in data["days"]) == data["totalTasks"] == 14


def test_timeline_preview_needs_deliverables(client):
    resp = client.post("/api/timeline/preview", json={"dueDate": DUE.isoformat()})

    assert resp.status_code == 400
