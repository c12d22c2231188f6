import pytest

from boxtracker.schemas.box_schema import BoxPosition, BoxStatus
from boxtracker.services import lifecycle


@pytest.mark.parametrize("status", list(BoxStatus))
def test_parse_status_accepts_every_valid_value(status):
    assert lifecycle.parse_status(status.value) == status
    assert lifecycle.parse_status(status) == status


@pytest.mark.parametrize("raw", [None, "", "Packed", "shipped", 3, ["loaded"], {"status": "out"}])
def test_parse_status_defaults_to_packed(raw):
    assert lifecycle.parse_status(raw) == BoxStatus.PACKED


def test_only_leaving_loaded_clears_position():
    for current in BoxStatus:
        for new in BoxStatus:
            expected = current == BoxStatus.LOADED and new != BoxStatus.LOADED
            assert lifecycle.should_clear_position(current, new) is expected


def test_activity_texts():
    pos = BoxPosition(depth="middle", horizontal="right", vertical="mid")
    assert lifecycle.created_activity(12) == ("created", "Box #12 created")
    assert lifecycle.updated_activity(12) == ("updated", "Box #12 updated")
    assert lifecycle.deleted_activity(12) == ("deleted", "Box #12 deleted")
    assert lifecycle.status_activity(12, BoxStatus.DELIVERED) == (
        "delivered",
        "Box #12 marked as delivered",
    )
    assert lifecycle.position_activity(12, pos, BoxStatus.LOADED) == (
        "loaded",
        "Box #12 loaded onto truck (middle-right-mid)",
    )
    assert lifecycle.position_activity(12, pos, None) == (
        "moved",
        "Box #12 moved to position middle-right-mid",
    )


def test_position_label():
    assert lifecycle.position_label(None) == "-"
    pos = BoxPosition(depth="front", horizontal="left", vertical="high")
    assert lifecycle.position_label(pos) == "Top Front Left"
    pos = BoxPosition(depth="back", horizontal="center", vertical="low")
    assert lifecycle.position_label(pos) == "Bottom Back Center"


def test_position_rejects_cells_outside_the_grid():
    with pytest.raises(ValueError):
        BoxPosition(depth="roof", horizontal="left", vertical="high")
