"""
Tests de la couche de synchronisation frontend (requests mocké)
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from app.client.api import TaskAPIError, TasksAPI
from app.client.sync import TaskBoard, TaskForm


def fake_response(status_code=200, json_data=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


def task(task_id="t1", **fields):
    data = {"_id": task_id, "title": "Tâche", "completed": False, "priority": "medium"}
    data.update(fields)
    return data


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def api(session):
    return TasksAPI("http://api.test/api/", session=session)


# ============ TESTS TasksAPI ============

def test_get_tasks_builds_query(api, session):
    session.get.return_value = fake_response(200, [task()])
    result = api.get_tasks({"completed": False, "priority": "high", "sortBy": None})
    assert result == [task()]
    session.get.assert_called_once_with(
        "http://api.test/api/tasks",
        params={"completed": "false", "priority": "high"},
    )


def test_get_tasks_non_array_falls_back_to_empty(api, session):
    session.get.return_value = fake_response(200, {"unexpected": True})
    assert api.get_tasks() == []


def test_create_task_error_message_verbatim(api, session):
    envelope = {"error": "Validation failed", "details": {"type": "ValidationError", "validationErrors": []}}
    session.post.return_value = fake_response(400, envelope)
    with pytest.raises(TaskAPIError) as exc:
        api.create_task({"title": ""})
    assert str(exc.value) == "Validation failed"
    assert exc.value.status_code == 400
    assert exc.value.details["type"] == "ValidationError"


def test_error_without_json_body(api, session):
    session.delete.return_value = fake_response(502, ValueError("no json"))
    with pytest.raises(TaskAPIError) as exc:
        api.delete_task("t1")
    assert exc.value.message == "HTTP error! status: 502"


def test_update_and_delete_urls(api, session):
    session.put.return_value = fake_response(200, task(completed=True))
    session.delete.return_value = fake_response(204)
    assert api.update_task("t1", {"completed": True})["completed"] is True
    session.put.assert_called_once_with("http://api.test/api/tasks/t1", json={"completed": True})
    assert api.delete_task("t1") is None
    session.delete.assert_called_once_with("http://api.test/api/tasks/t1")


def test_invalid_task_payload(api, session):
    session.get.return_value = fake_response(200, ["not", "a", "task"])
    with pytest.raises(TaskAPIError):
        api.get_task("t1")


# ============ TESTS TaskBoard ============

def test_refresh_only_when_token_changes():
    api = MagicMock()
    api.get_tasks.return_value = [task()]
    board = TaskBoard(api)

    assert board.refresh(0) is True
    assert board.refresh(0) is False
    assert board.refresh(1) is True
    assert api.get_tasks.call_count == 2
    assert board.tasks == [task()]


def test_refresh_error_is_surfaced():
    api = MagicMock()
    api.get_tasks.side_effect = TaskAPIError("Internal server error", 500)
    board = TaskBoard(api)
    board.refresh(1)
    assert board.error == "Internal server error"
    assert board.loading is False


def test_toggle_is_optimistic():
    """L'état local change avant la réponse du serveur"""
    api = MagicMock()
    board = TaskBoard(api)
    board.tasks = [task()]

    def check_local_state(task_id, data):
        assert board.tasks[0]["completed"] is True
        assert task_id in board.pending
        return task(completed=True, status="Completed")

    api.update_task.side_effect = check_local_state
    assert board.toggle_completed("t1") is True
    assert board.tasks[0]["status"] == "Completed"
    assert board.pending == set()


def test_toggle_reverts_on_failure():
    api = MagicMock()
    api.update_task.side_effect = TaskAPIError("Task not found", 404)
    board = TaskBoard(api)
    board.tasks = [task()]

    assert board.toggle_completed("t1") is False
    assert board.tasks[0]["completed"] is False
    assert board.error == "Task not found"
    assert board.pending == set()


def test_delete_requires_confirmation():
    api = MagicMock()
    board = TaskBoard(api)
    board.tasks = [task("t1"), task("t2")]

    assert board.delete_task("t1", confirm=lambda t: False) is False
    api.delete_task.assert_not_called()
    assert len(board.tasks) == 2

    assert board.delete_task("t1", confirm=lambda t: True) is True
    api.delete_task.assert_called_once_with("t1")
    assert [t["_id"] for t in board.tasks] == ["t2"]


def test_delete_failure_keeps_task():
    api = MagicMock()
    api.delete_task.side_effect = TaskAPIError("Invalid task ID format", 400)
    board = TaskBoard(api)
    board.tasks = [task()]
    assert board.delete_task("t1", confirm=lambda t: True) is False
    assert len(board.tasks) == 1
    assert board.error == "Invalid task ID format"


# ============ TESTS TaskForm ============

def test_form_clears_after_success():
    api = MagicMock()
    api.create_task.return_value = task(title="Nouvelle")
    created = []
    form = TaskForm(api, on_created=created.append)
    form.values.update(title="Nouvelle", priority="high")

    assert form.submit() == task(title="Nouvelle")
    api.create_task.assert_called_once_with({"title": "Nouvelle", "description": "", "priority": "high"})
    assert form.values == TaskForm.EMPTY
    assert form.disabled is False
    assert form.error is None
    assert created == [task(title="Nouvelle")]


def test_form_disabled_while_in_flight():
    api = MagicMock()
    form = TaskForm(api)
    form.values["title"] = "En cours"

    def check_disabled(payload):
        assert form.disabled is True
        return task()

    api.create_task.side_effect = check_disabled
    form.submit()
    assert form.disabled is False


def test_form_keeps_values_on_server_error():
    api = MagicMock()
    api.create_task.side_effect = TaskAPIError("Validation failed", 400)
    form = TaskForm(api)
    form.values.update(title="Garde-moi")

    assert form.submit() is None
    assert form.error == "Validation failed"
    assert form.values["title"] == "Garde-moi"
    assert form.disabled is False


def test_form_local_rules_block_request():
    """Mêmes règles que le serveur: pas d'appel si le titre est vide"""
    api = MagicMock()
    form = TaskForm(api)
    assert form.submit() is None
    assert form.error == "Title is required"
    api.create_task.assert_not_called()


def test_form_sends_due_date():
    api = MagicMock()
    api.create_task.return_value = task()
    form = TaskForm(api)
    due = (datetime.now(timezone.utc) + timedelta(days=2)).date().isoformat()
    form.values.update(title="Avec date", dueDate=due)
    form.submit()
    assert api.create_task.call_args.args[0]["dueDate"] == due
