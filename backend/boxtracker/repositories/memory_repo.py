import threading
from typing import Dict, List, Optional

from boxtracker.repositories.base import Clock, InventoryRepository
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
from boxtracker.services import lifecycle
from boxtracker.utils.log_setup import get_logger

log = get_logger("store.memory")


class MemoryInventoryRepository(InventoryRepository):
    """
    Process-local store: one dict per entity, monotonic id counters that are
    never rewound. Records handed out are copies, so callers cannot mutate
    stored state behind the store's back.
    """

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        self._lock = threading.RLock()
        self.boxes: Dict[int, BoxOut] = {}
        self.activities: Dict[int, ActivityOut] = {}
        self.qr_codes: Dict[int, QrCodeOut] = {}
        self.owners: Dict[int, OwnerOut] = {}
        self._box_seq = 0
        self._activity_seq = 0
        self._qr_seq = 0
        self._owner_seq = 0

    # ---- boxes ----

    def list_boxes(self) -> List[BoxOut]:
        with self._lock:
            boxes = sorted(
                self.boxes.values(), key=lambda b: (b.updated_at, b.id), reverse=True
            )
            return [b.model_copy() for b in boxes]

    def get_box(self, box_id: int) -> Optional[BoxOut]:
        with self._lock:
            box = self.boxes.get(box_id)
            return box.model_copy() if box else None

    def get_box_by_number(self, box_number: int) -> Optional[BoxOut]:
        with self._lock:
            box = next(
                (b for _, b in sorted(self.boxes.items()) if b.box_number == box_number),
                None,
            )
            return box.model_copy() if box else None

    def create_box(self, data: BoxCreate) -> BoxOut:
        with self._lock:
            self._box_seq += 1
            now = self._now()
            box = BoxOut(
                id=self._box_seq,
                box_number=data.box_number,
                owner=data.owner,
                room=data.room,
                contents=data.contents,
                status=lifecycle.parse_status(data.status),
                position=None,
                created_at=now,
                updated_at=now,
            )
            self.boxes[box.id] = box
            self._append(box.id, *lifecycle.created_activity(box.box_number))
            log.debug("created box id=%s number=%s", box.id, box.box_number)
            return box.model_copy()

    def update_box(self, box_id: int, data: BoxUpdate) -> Optional[BoxOut]:
        with self._lock:
            box = self.boxes.get(box_id)
            if not box:
                return None
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            if "status" in changes:
                changes["status"] = lifecycle.parse_status(changes["status"])
            changes["updated_at"] = self._now()
            updated = box.model_copy(update=changes)
            self.boxes[box_id] = updated
            self._append(box_id, *lifecycle.updated_activity(box.box_number))
            return updated.model_copy()

    def update_box_position(
        self, box_id: int, position: BoxPosition, status: Optional[BoxStatus] = None
    ) -> Optional[BoxOut]:
        with self._lock:
            box = self.boxes.get(box_id)
            if not box:
                return None
            changes = {"position": position, "updated_at": self._now()}
            if status:
                changes["status"] = BoxStatus(status)
            updated = box.model_copy(update=changes)
            self.boxes[box_id] = updated
            self._append(
                box_id,
                *lifecycle.position_activity(box.box_number, position, status),
            )
            return updated.model_copy()

    def update_box_status(self, box_id: int, status: BoxStatus) -> Optional[BoxOut]:
        with self._lock:
            box = self.boxes.get(box_id)
            if not box:
                return None
            status = BoxStatus(status)
            position = box.position
            if lifecycle.should_clear_position(box.status, status):
                position = None
            updated = box.model_copy(
                update={"status": status, "position": position, "updated_at": self._now()}
            )
            self.boxes[box_id] = updated
            self._append(box_id, *lifecycle.status_activity(box.box_number, status))
            return updated.model_copy()

    def delete_box(self, box_id: int) -> bool:
        with self._lock:
            box = self.boxes.pop(box_id, None)
            if not box:
                return False
            for qr_id in [q.id for q in self.qr_codes.values() if q.box_id == box_id]:
                del self.qr_codes[qr_id]
            # the box's activity history stays in the log
            self._append(box_id, *lifecycle.deleted_activity(box.box_number))
            log.debug("deleted box id=%s", box_id)
            return True

    # ---- activity log ----

    def _append(self, box_id: Optional[int], type_: str, description: str) -> ActivityOut:
        self._activity_seq += 1
        activity = ActivityOut(
            id=self._activity_seq,
            box_id=box_id,
            type=type_,
            description=description,
            timestamp=self._now(),
        )
        self.activities[activity.id] = activity
        return activity

    @staticmethod
    def _newest_first(activities) -> List[ActivityOut]:
        # id breaks timestamp ties: later insert sorts first
        return sorted(activities, key=lambda a: (a.timestamp, a.id), reverse=True)

    def list_activities(self, limit: Optional[int] = None) -> List[ActivityOut]:
        limit = lifecycle.activity_limit(limit)
        with self._lock:
            activities = self._newest_first(self.activities.values())
        if limit is not None:
            activities = activities[:limit]
        return [a.model_copy() for a in activities]

    def list_box_activities(self, box_id: int) -> List[ActivityOut]:
        with self._lock:
            activities = self._newest_first(
                a for a in self.activities.values() if a.box_id == box_id
            )
        return [a.model_copy() for a in activities]

    def append_activity(self, data: ActivityCreate) -> ActivityOut:
        with self._lock:
            return self._append(data.box_id, data.type, data.description).model_copy()

    # ---- qr codes ----

    def get_qr_code(self, qr_id: int) -> Optional[QrCodeOut]:
        with self._lock:
            qr = self.qr_codes.get(qr_id)
            return qr.model_copy() if qr else None

    def get_qr_code_by_box_id(self, box_id: int) -> Optional[QrCodeOut]:
        with self._lock:
            qr = next((q for q in self.qr_codes.values() if q.box_id == box_id), None)
            return qr.model_copy() if qr else None

    def create_qr_code(self, data: QrCodeCreate) -> QrCodeOut:
        with self._lock:
            self._qr_seq += 1
            qr = QrCodeOut(
                id=self._qr_seq, box_id=data.box_id, data=data.data, created_at=self._now()
            )
            self.qr_codes[qr.id] = qr
            return qr.model_copy()

    def get_or_create_qr_code(self, box_id: int, data: str) -> Optional[QrCodeOut]:
        with self._lock:
            if box_id not in self.boxes:
                return None
            qr = self.get_qr_code_by_box_id(box_id)
            return qr or self.create_qr_code(QrCodeCreate(box_id=box_id, data=data))

    # ---- owners ----

    def list_owners(self) -> List[OwnerOut]:
        with self._lock:
            owners = sorted(
                self.owners.values(), key=lambda o: (o.updated_at, o.id), reverse=True
            )
            return [o.model_copy() for o in owners]

    def get_owner(self, owner_id: int) -> Optional[OwnerOut]:
        with self._lock:
            owner = self.owners.get(owner_id)
            return owner.model_copy() if owner else None

    def create_owner(self, data: OwnerCreate) -> OwnerOut:
        with self._lock:
            self._owner_seq += 1
            now = self._now()
            owner = OwnerOut(
                id=self._owner_seq,
                name=data.name,
                color=data.color,
                created_at=now,
                updated_at=now,
            )
            self.owners[owner.id] = owner
            return owner.model_copy()

    def update_owner(self, owner_id: int, data: OwnerUpdate) -> Optional[OwnerOut]:
        with self._lock:
            owner = self.owners.get(owner_id)
            if not owner:
                return None
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            changes["updated_at"] = self._now()
            updated = owner.model_copy(update=changes)
            self.owners[owner_id] = updated
            return updated.model_copy()

    def delete_owner(self, owner_id: int) -> bool:
        with self._lock:
            owner = self.owners.get(owner_id)
            if not owner:
                return False
            name = owner.name.lower()
            if any(b.owner.lower() == name for b in self.boxes.values()):
                log.info("refusing to delete owner %r: still assigned to boxes", owner.name)
                return False
            del self.owners[owner_id]
            return True
