from boxtracker.main import app
from fastapi.testclient import TestClient

client = TestClient(app)


def test_health_ok():
    res = client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["backend"] in ("database", "memory")
    assert "db" in body


def test_liveness_with_lifespan():
    # entering the client runs startup (init_db, scheduler) and shutdown
    with TestClient(app) as c:
        res = c.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}
