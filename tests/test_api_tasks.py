from conftest import backend_headers


def _create(client, headers, **fields):
    body = {"text": "Write report", **fields}
    response = client.post("/v1/tasks", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_tasks_require_session(client):
    assert client.get("/v1/tasks", headers=backend_headers()).status_code == 401


def test_create_and_list_tasks_newest_first(client, auth_headers):
    first = _create(client, auth_headers, text="  First   task ", category="work", priority=True)
    second = _create(client, auth_headers, text="Second", category="bogus", due_date="2026-03-01")

    assert first["text"] == "First task"
    assert first["priority"] is True
    assert second["category"] == "personal"
    assert second["due_date"] == "2026-03-01"

    items = client.get("/v1/tasks", headers=auth_headers).json()["items"]
    assert [item["id"] for item in items] == [second["id"], first["id"]]
    assert items[0]["sub_tasks"] == []


def test_create_task_rejects_blank_text(client, auth_headers):
    response = client.post("/v1/tasks", json={"text": "   "}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Task text cannot be empty"


def test_create_task_with_sub_tasks(client, auth_headers):
    task = _create(client, auth_headers, sub_tasks=[{"text": "Outline"}, {"text": "Draft", "completed": True}])
    statuses = {item["text"]: item["status"] for item in task["sub_tasks"]}
    assert statuses == {"Outline": "todo", "Draft": "done"}


def test_create_task_with_blank_sub_task_stores_nothing(client, auth_headers):
    response = client.post(
        "/v1/tasks",
        json={"text": "Write report", "sub_tasks": [{"text": "outline"}, {"text": "   "}]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert client.get("/v1/tasks", headers=auth_headers).json()["items"] == []


def test_patch_and_toggle_task(client, auth_headers):
    task = _create(client, auth_headers)
    patched = client.patch(
        f"/v1/tasks/{task['id']}", json={"notes": "remember charts", "priority": True}, headers=auth_headers
    ).json()
    assert patched["notes"] == "remember charts"
    assert patched["priority"] is True
    assert patched["text"] == "Write report"

    toggled = client.post(f"/v1/tasks/{task['id']}/toggle", headers=auth_headers).json()
    assert toggled["task"]["completed"] is True
    assert toggled["affirmation"]

    toggled_back = client.post(f"/v1/tasks/{task['id']}/toggle", headers=auth_headers).json()
    assert toggled_back["task"]["completed"] is False
    assert toggled_back["affirmation"] is None


def test_replace_task(client, auth_headers):
    task = _create(client, auth_headers)
    response = client.put(
        f"/v1/tasks/{task['id']}",
        json={"text": "Rewrite report", "completed": True, "category": "study", "priority": False},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["category"] == "study"
    assert response.json()["completed"] is True


def test_delete_task_cascades_sub_tasks(client, auth_headers):
    task = _create(client, auth_headers, sub_tasks=[{"text": "Outline"}])
    sub_task_id = task["sub_tasks"][0]["id"]
    assert client.delete(f"/v1/tasks/{task['id']}", headers=auth_headers).json() == {"ok": True}
    assert client.delete(f"/v1/tasks/{task['id']}", headers=auth_headers).status_code == 404
    assert client.post(f"/v1/subtasks/{sub_task_id}/toggle", headers=auth_headers).status_code == 404


def test_tasks_are_scoped_to_owner(client, register):
    owner = backend_headers(register(email="ana@example.com")["token"])
    other = backend_headers(register(email="bo@example.com")["token"])
    task = _create(client, owner)

    assert client.get("/v1/tasks", headers=other).json()["items"] == []
    assert client.patch(f"/v1/tasks/{task['id']}", json={"text": "x"}, headers=other).status_code == 404
    assert client.post(f"/v1/tasks/{task['id']}/toggle", headers=other).status_code == 404
    assert client.delete(f"/v1/tasks/{task['id']}", headers=other).status_code == 404


def test_sub_task_lifecycle(client, auth_headers):
    task = _create(client, auth_headers)
    sub_task = client.post(
        f"/v1/tasks/{task['id']}/subtasks", json={"text": "Collect data"}, headers=auth_headers
    ).json()
    assert sub_task["status"] == "todo"
    assert sub_task["task_id"] == task["id"]

    in_progress = client.patch(
        f"/v1/subtasks/{sub_task['id']}", json={"status": "inProgress"}, headers=auth_headers
    ).json()
    assert in_progress["status"] == "inProgress"
    assert in_progress["completed"] is False

    done = client.post(f"/v1/subtasks/{sub_task['id']}/toggle", headers=auth_headers).json()
    assert done["completed"] is True
    assert done["status"] == "done"

    undone = client.patch(f"/v1/subtasks/{sub_task['id']}", json={"completed": False}, headers=auth_headers).json()
    assert undone["status"] == "todo"

    assert client.delete(f"/v1/subtasks/{sub_task['id']}", headers=auth_headers).json() == {"ok": True}
    listed = client.get("/v1/tasks", headers=auth_headers).json()["items"]
    assert listed[0]["sub_tasks"] == []


def test_sub_task_on_missing_task(client, auth_headers):
    response = client.post("/v1/tasks/missing/subtasks", json={"text": "Nope"}, headers=auth_headers)
    assert response.status_code == 404


def test_import_tasks(client, auth_headers):
    response = client.post(
        "/v1/tasks/import",
        json={
            "tasks": [
                {"text": "Guest one", "category": "study", "sub_tasks": [{"text": "Step", "status": "inProgress"}]},
                {"text": "Guest two", "completed": True},
            ]
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["text"] for item in items] == ["Guest one", "Guest two"]
    assert items[0]["sub_tasks"][0]["status"] == "inProgress"
    assert len(client.get("/v1/tasks", headers=auth_headers).json()["items"]) == 2


def test_import_is_all_or_nothing(client, auth_headers):
    response = client.post(
        "/v1/tasks/import",
        json={"tasks": [{"text": "first"}, {"text": "second", "sub_tasks": [{"text": "ok"}, {"text": " "}]}]},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert client.get("/v1/tasks", headers=auth_headers).json()["items"] == []


def test_settings_defaults_and_update(client, auth_headers):
    defaults = client.get("/v1/settings", headers=auth_headers).json()
    assert defaults["current_mood"] == "motivated"
    assert defaults["focus_minutes"] == 25
    assert defaults["recent_searches"] == []

    updated = client.put(
        "/v1/settings",
        json={"current_mood": "focused", "focus_minutes": 45, "sound_enabled": False,
              "recent_searches": ["lofi", "jazz", "kpop", "rock", "edm", "pop"]},
        headers=auth_headers,
    ).json()
    assert updated["current_mood"] == "focused"
    assert updated["focus_minutes"] == 45
    assert updated["sound_enabled"] is False
    assert updated["break_minutes"] == 5
    assert updated["recent_searches"] == ["lofi", "jazz", "kpop", "rock", "edm"]


def test_settings_validation(client, auth_headers):
    assert client.put("/v1/settings", json={"current_mood": "grumpy"}, headers=auth_headers).status_code == 400
    assert client.put("/v1/settings", json={"focus_minutes": 121}, headers=auth_headers).status_code == 422
    assert client.put("/v1/settings", json={"alarm_volume": 101}, headers=auth_headers).status_code == 422


def test_liked_videos(client, auth_headers):
    body = {"video_id": "jfKfPfyJRdk", "title": "lofi hip hop radio", "channel": "Lofi Girl"}
    assert client.post("/v1/music/liked", json=body, headers=auth_headers).status_code == 200
    assert client.post("/v1/music/liked", json=body, headers=auth_headers).status_code == 200
    items = client.get("/v1/music/liked", headers=auth_headers).json()["items"]
    assert [item["video_id"] for item in items] == ["jfKfPfyJRdk"]

    client.delete("/v1/music/liked/jfKfPfyJRdk", headers=auth_headers)
    assert client.get("/v1/music/liked", headers=auth_headers).json()["items"] == []


def test_liked_video_rejects_bad_id(client, auth_headers):
    response = client.post("/v1/music/liked", json={"video_id": "not a video"}, headers=auth_headers)
    assert response.status_code == 400
