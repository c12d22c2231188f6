import importlib.util
import json
import os

import pytest

from boxtracker.repositories.memory_repo import MemoryInventoryRepository
from boxtracker.schemas.box_schema import BoxStatus

SCRIPT = os.path.join(os.path.dirname(__file__), "..", "scripts", "seed_boxes.py")


@pytest.fixture(scope="module")
def seed_module():
    spec = importlib.util.spec_from_file_location("seed_boxes", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_seed_from_file(tmp_path, seed_module):
    data = {
        "owners": [{"name": "Alex", "color": "#3366ff"}, {"name": "alex", "color": "#000000"}],
        "boxes": [
            {"boxNumber": 1, "owner": "Alex", "room": "Kitchen", "contents": "Mugs"},
            {
                "box_number": 2,
                "owner": "Alex",
                "room": "Garage",
                "contents": "Tools",
                "status": "loaded",
                "position": {"depth": "back", "horizontal": "right", "vertical": "low"},
            },
            {"number": 3, "owner": "", "room": "Hall", "contents": "skipped"},
        ],
    }
    path = tmp_path / "boxes.json"
    path.write_text(json.dumps(data), encoding="utf-8")

    repo = MemoryInventoryRepository()
    counts = seed_module.seed_from_file(repo, str(path))

    assert counts == {"owners": 1, "boxes": 2}
    placed = repo.get_box_by_number(2)
    assert placed.status == BoxStatus.LOADED
    assert placed.position.depth == "back"
    assert repo.list_box_activities(placed.id)[0].type == "loaded"


def test_seed_plain_list(tmp_path, seed_module):
    path = tmp_path / "boxes.json"
    path.write_text(json.dumps([{"boxNumber": 5, "owner": "Sam", "room": "Den", "contents": "Games"}]))
    repo = MemoryInventoryRepository()
    assert seed_module.seed_from_file(repo, str(path)) == {"owners": 0, "boxes": 1}


def test_seed_missing_file(seed_module):
    with pytest.raises(FileNotFoundError):
        seed_module.seed_from_file(MemoryInventoryRepository(), "/nonexistent/boxes.json")


def test_seed_skips_boxes_without_a_number(tmp_path, seed_module):
    path = tmp_path / "boxes.json"
    path.write_text(
        json.dumps(
            [
                {"owner": "Sam", "room": "Den", "contents": "no number"},
                {"boxNumber": "abc", "owner": "Sam", "room": "Den", "contents": "bad number"},
                {"boxNumber": "8", "owner": "Sam", "room": "Den", "contents": "Lamps"},
            ]
        )
    )
    repo = MemoryInventoryRepository()
    assert seed_module.seed_from_file(repo, str(path)) == {"owners": 0, "boxes": 1}
    assert repo.get_box_by_number(8).contents == "Lamps"
