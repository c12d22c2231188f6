from fastapi.testclient import TestClient

from boxtracker.db import init_db
from boxtracker.main import app

client = TestClient(app)

BOX = {"box_number": 1, "owner": "Alex", "room": "Kitchen", "contents": "Mugs", "status": "packed"}
FRONT_LEFT_HIGH = {"depth": "front", "horizontal": "left", "vertical": "high"}


def setup_module(module):
    init_db(reset=True)


def _create(**overrides):
    res = client.post("/api/boxes", json={**BOX, **overrides})
    assert res.status_code == 201
    return res.json()


def test_create_and_fetch_box():
    box = _create(box_number=11)
    assert box["status"] == "packed"
    assert box["position"] is None

    res = client.get(f"/api/boxes/{box['id']}")
    assert res.status_code == 200
    assert res.json()["box_number"] == 11

    res = client.get("/api/boxes/number/11")
    assert res.status_code == 200
    assert res.json()["id"] == box["id"]

    ids = [b["id"] for b in client.get("/api/boxes").json()]
    assert box["id"] in ids


def test_create_box_with_unknown_status_is_packed():
    box = _create(status="teleported")
    assert box["status"] == "packed"


def test_create_box_rejects_bad_shape():
    res = client.post("/api/boxes", json={"owner": "Alex"})
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid request data"
    assert res.json()["errors"]


def test_non_integer_id_is_400():
    assert client.get("/api/boxes/abc").status_code == 400


def test_missing_box_is_404():
    assert client.get("/api/boxes/999999").status_code == 404
    assert client.get("/api/boxes/number/999999").status_code == 404
    assert client.put("/api/boxes/999999", json={"room": "Den"}).status_code == 404
    assert client.patch("/api/boxes/999999/status", json={"status": "out"}).status_code == 404
    assert (
        client.patch("/api/boxes/999999/position", json={"position": FRONT_LEFT_HIGH}).status_code
        == 404
    )
    assert client.delete("/api/boxes/999999").status_code == 404
    assert client.get("/api/boxes/999999/qrcode").status_code == 404


def test_box_id_beyond_64_bits_is_404():
    huge = 2**70
    assert client.get(f"/api/boxes/{huge}").status_code == 404
    assert client.get(f"/api/boxes/number/{huge}").status_code == 404
    assert client.put(f"/api/boxes/{huge}", json={"room": "Den"}).status_code == 404
    assert client.patch(f"/api/boxes/{huge}/status", json={"status": "out"}).status_code == 404
    assert client.delete(f"/api/boxes/{huge}").status_code == 404
    assert client.get(f"/api/boxes/{huge}/qrcode").status_code == 404
    assert client.get(f"/api/boxes/{huge}/activities").json() == []
    assert client.get(f"/api/qrcodes/{huge}").status_code == 404
    assert client.post("/api/qrcodes/scan", json={"data": f"boxtracker-{huge}"}).status_code == 404


def test_box_number_beyond_64_bits_is_rejected():
    res = client.post(
        "/api/boxes",
        json={"box_number": 2**70, "owner": "Alex", "room": "Den", "contents": "Games"},
    )
    assert res.status_code == 400


def test_partial_update():
    box = _create(room="Kitchen", contents="Mugs")
    res = client.put(f"/api/boxes/{box['id']}", json={"contents": "Glasses"})
    assert res.status_code == 200
    body = res.json()
    assert body["contents"] == "Glasses"
    assert body["room"] == "Kitchen"


def test_load_then_unload_flow():
    box = _create(box_number=1)
    res = client.patch(
        f"/api/boxes/{box['id']}/position",
        json={"position": FRONT_LEFT_HIGH, "status": "loaded"},
    )
    assert res.status_code == 200
    assert res.json()["status"] == "loaded"
    assert res.json()["position"] == FRONT_LEFT_HIGH

    res = client.patch(f"/api/boxes/{box['id']}/status", json={"status": "out"})
    assert res.status_code == 200
    assert res.json()["status"] == "out"
    assert res.json()["position"] is None

    log = client.get(f"/api/boxes/{box['id']}/activities").json()
    assert [a["type"] for a in log] == ["out", "loaded", "created"]


def test_status_and_position_are_validated_strictly():
    box = _create()
    res = client.patch(f"/api/boxes/{box['id']}/status", json={"status": "lost"})
    assert res.status_code == 400
    res = client.patch(
        f"/api/boxes/{box['id']}/position",
        json={"position": {"depth": "roof", "horizontal": "left", "vertical": "high"}},
    )
    assert res.status_code == 400
    assert client.get(f"/api/boxes/{box['id']}").json()["position"] is None


def test_qr_code_is_created_once():
    box = _create()
    first = client.get(f"/api/boxes/{box['id']}/qrcode")
    second = client.get(f"/api/boxes/{box['id']}/qrcode")
    assert first.status_code == second.status_code == 200
    assert first.json()["data"] == f"boxtracker-{box['id']}"
    assert first.json()["id"] == second.json()["id"]

    res = client.get(f"/api/qrcodes/{first.json()['id']}")
    assert res.status_code == 200
    assert res.json()["box_id"] == box["id"]


def test_scan_resolves_box():
    box = _create(box_number=77)
    res = client.post("/api/qrcodes/scan", json={"data": f"boxtracker-{box['id']}"})
    assert res.status_code == 200
    assert res.json()["box_number"] == 77
    assert client.post("/api/qrcodes/scan", json={"data": "hello"}).status_code == 400
    assert client.post("/api/qrcodes/scan", json={"data": "boxtracker-999999"}).status_code == 404


def test_delete_box():
    box = _create()
    client.get(f"/api/boxes/{box['id']}/qrcode")
    res = client.delete(f"/api/boxes/{box['id']}")
    assert res.status_code == 204
    assert client.get(f"/api/boxes/{box['id']}").status_code == 404
    log = client.get(f"/api/boxes/{box['id']}/activities").json()
    assert log[0]["type"] == "deleted"


def test_export_csv():
    _create(box_number=501, owner="Exporter", status="staging")
    res = client.get("/api/export/boxes.csv", params={"status": "staging"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=boxtracker_export_" in res.headers["content-disposition"]
    lines = res.text.strip().split("\n")
    assert lines[0] == "Box #,Owner,Room,Contents,Status,Location"
    assert "501,Exporter,Kitchen,Mugs,staging,-" in lines
