"""
Status and position rules shared by every repository implementation, so the
memory and SQL stores cannot drift apart.
"""
from typing import Any, Optional, Tuple

from boxtracker.schemas.box_schema import BoxPosition, BoxStatus

DEFAULT_STATUS = BoxStatus.PACKED

VERTICAL_LABELS = {"high": "Top", "mid": "Middle", "low": "Bottom"}


def parse_status(value: Any) -> BoxStatus:
    """
    Return the BoxStatus for `value`, or PACKED when it is missing or not one
    of the six known values. Never raises.
    """
    if isinstance(value, BoxStatus):
        return value
    if isinstance(value, str):
        try:
            return BoxStatus(value)
        except ValueError:
            pass
    return DEFAULT_STATUS


def activity_limit(limit: Optional[int]) -> Optional[int]:
    """Positive limits truncate the log; None or anything below 1 means no limit."""
    if limit is None or limit < 1:
        return None
    return limit


def should_clear_position(current: BoxStatus, new: BoxStatus) -> bool:
    # leaving the truck drops the grid cell; every other change keeps it
    return current == BoxStatus.LOADED and new != BoxStatus.LOADED


def created_activity(box_number: int) -> Tuple[str, str]:
    return "created", f"Box #{box_number} created"


def updated_activity(box_number: int) -> Tuple[str, str]:
    return "updated", f"Box #{box_number} updated"


def deleted_activity(box_number: int) -> Tuple[str, str]:
    return "deleted", f"Box #{box_number} deleted"


def status_activity(box_number: int, status: BoxStatus) -> Tuple[str, str]:
    return status.value.lower(), f"Box #{box_number} marked as {status.value}"


def position_activity(
    box_number: int, position: BoxPosition, status: Optional[BoxStatus]
) -> Tuple[str, str]:
    if status == BoxStatus.LOADED:
        return (
            "loaded",
            f"Box #{box_number} loaded onto truck ({position.code()})",
        )
    return "moved", f"Box #{box_number} moved to position {position.code()}"


def position_label(position: Optional[BoxPosition]) -> str:
    """Human readable cell name, e.g. "Top Front Left"; "-" when unplaced."""
    if position is None:
        return "-"
    vertical = VERTICAL_LABELS.get(position.vertical, position.vertical)
    return f"{vertical} {position.depth.capitalize()} {position.horizontal.capitalize()}"
