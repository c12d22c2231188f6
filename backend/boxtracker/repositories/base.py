from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from boxtracker.schemas.activity_schema import ActivityCreate, ActivityOut
from boxtracker.schemas.box_schema import (
    BoxCreate,
    BoxOut,
    BoxPosition,
    BoxStatus,
    BoxUpdate,
)
from boxtracker.schemas.owner_schema import OwnerCreate, OwnerOut, OwnerUpdate
from boxtracker.schemas.qr_schema import QrCodeCreate, QrCodeOut

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InventoryRepository(ABC):
    """
    Store contract for boxes, owners, QR codes and the activity log.

    Missing records come back as None (lookups, updates) or False (deletes);
    nothing here raises for a missing id. Every box mutation appends exactly
    one activity in the same unit of work.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or utc_now

    def _now(self) -> datetime:
        return self.clock()

    # boxes
    @abstractmethod
    def list_boxes(self) -> List[BoxOut]: ...

    @abstractmethod
    def get_box(self, box_id: int) -> Optional[BoxOut]: ...

    @abstractmethod
    def get_box_by_number(self, box_number: int) -> Optional[BoxOut]: ...

    @abstractmethod
    def create_box(self, data: BoxCreate) -> BoxOut: ...

    @abstractmethod
    def update_box(self, box_id: int, data: BoxUpdate) -> Optional[BoxOut]: ...

    @abstractmethod
    def update_box_position(
        self, box_id: int, position: BoxPosition, status: Optional[BoxStatus] = None
    ) -> Optional[BoxOut]: ...

    @abstractmethod
    def update_box_status(self, box_id: int, status: BoxStatus) -> Optional[BoxOut]: ...

    @abstractmethod
    def delete_box(self, box_id: int) -> bool: ...

    # activity log
    @abstractmethod
    def list_activities(self, limit: Optional[int] = None) -> List[ActivityOut]: ...

    @abstractmethod
    def list_box_activities(self, box_id: int) -> List[ActivityOut]: ...

    @abstractmethod
    def append_activity(self, data: ActivityCreate) -> ActivityOut: ...

    # qr codes
    @abstractmethod
    def get_qr_code(self, qr_id: int) -> Optional[QrCodeOut]: ...

    @abstractmethod
    def get_qr_code_by_box_id(self, box_id: int) -> Optional[QrCodeOut]: ...

    @abstractmethod
    def create_qr_code(self, data: QrCodeCreate) -> QrCodeOut: ...

    @abstractmethod
    def get_or_create_qr_code(self, box_id: int, data: str) -> Optional[QrCodeOut]:
        """The box's QR code, stored with `data` on first call; None if no such box."""

    # owners
    @abstractmethod
    def list_owners(self) -> List[OwnerOut]: ...

    @abstractmethod
    def get_owner(self, owner_id: int) -> Optional[OwnerOut]: ...

    @abstractmethod
    def create_owner(self, data: OwnerCreate) -> OwnerOut: ...

    @abstractmethod
    def update_owner(self, owner_id: int, data: OwnerUpdate) -> Optional[OwnerOut]: ...

    @abstractmethod
    def delete_owner(self, owner_id: int) -> bool: ...

    def count_boxes(self) -> int:
        return len(self.list_boxes())

    def count_owners(self) -> int:
        return len(self.list_owners())

    def close(self) -> None:
        """Release whatever the store holds open; nothing by default."""
