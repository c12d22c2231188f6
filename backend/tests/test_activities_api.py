from fastapi.testclient import TestClient

from boxtracker.db import init_db
from boxtracker.main import app

client = TestClient(app)


def setup_module(module):
    init_db(reset=True)
    for n in range(1, 4):
        res = client.post(
            "/api/boxes",
            json={"box_number": n, "owner": "Alex", "room": "Den", "contents": "Books"},
        )
        assert res.status_code == 201


def test_list_activities_newest_first():
    log = client.get("/api/activities").json()
    assert len(log) == 3
    assert [a["description"] for a in log] == [
        "Box #3 created",
        "Box #2 created",
        "Box #1 created",
    ]


def test_limit():
    log = client.get("/api/activities", params={"limit": 2}).json()
    assert [a["description"] for a in log] == ["Box #3 created", "Box #2 created"]
    assert client.get("/api/activities", params={"limit": 0}).status_code == 400


def test_post_system_activity():
    res = client.post("/api/activities", json={"type": "note", "description": "Truck arrived"})
    assert res.status_code == 201
    assert res.json()["box_id"] is None
    assert client.get("/api/activities", params={"limit": 1}).json()[0]["id"] == res.json()["id"]
    assert client.post("/api/activities", json={"type": "note"}).status_code == 400
