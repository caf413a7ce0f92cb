from datetime import datetime


def test_health_ok(client):
    """L'API répond et la base est joignable"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
    datetime.fromisoformat(data["time"])


def test_health_database_disconnected(client, database):
    database.disconnect()
    assert client.get("/health").json()["database"] == "disconnected"


def test_index_lists_routes(client):
    data = client.get("/").json()
    assert data["message"] == "Task Manager API"
    assert data["status"] == "running"
    assert "POST /api/tasks" in data["endpoints"]
    assert set(data["errorFormat"]["details"]) == {"message", "type", "validationErrors"}
