from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from boxtracker.models.activity import Activity
from boxtracker.models.box import Box
from boxtracker.models.owner import Owner
from boxtracker.models.qr_code import QrCode
from boxtracker.repositories.base import Clock, InventoryRepository
from boxtracker.schemas.activity_schema import ActivityCreate, ActivityOut
from boxtracker.schemas.box_schema import (
    DB_INT_MAX,
    DB_INT_MIN,
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
from boxtracker.utils.transactions import unit_of_work

log = get_logger("store.sql")


def _storable(value: int) -> bool:
    # the driver raises OverflowError on integers the column cannot hold
    return DB_INT_MIN <= value <= DB_INT_MAX


class SqlInventoryRepository(InventoryRepository):
    """
    SQLAlchemy-backed store. Each mutation is one transaction on the caller's
    session: the box write and its activity row commit together or not at all.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        super().__init__(clock)
        self.db = db

    def _locked_box(self, box_id: int) -> Optional[Box]:
        if not _storable(box_id):
            return None
        # row lock where the dialect has one (ignored by SQLite)
        return self.db.query(Box).filter(Box.id == box_id).with_for_update().first()

    def _locked_owner(self, owner_id: int) -> Optional[Owner]:
        if not _storable(owner_id):
            return None
        return self.db.query(Owner).filter(Owner.id == owner_id).with_for_update().first()

    def close(self) -> None:
        self.db.close()

    # ---- boxes ----

    def list_boxes(self) -> List[BoxOut]:
        rows = self.db.query(Box).order_by(Box.updated_at.desc(), Box.id.desc()).all()
        return [BoxOut.model_validate(b) for b in rows]

    def get_box(self, box_id: int) -> Optional[BoxOut]:
        if not _storable(box_id):
            return None
        b = self.db.get(Box, box_id)
        return BoxOut.model_validate(b) if b else None

    def get_box_by_number(self, box_number: int) -> Optional[BoxOut]:
        if not _storable(box_number):
            return None
        b = (
            self.db.query(Box)
            .filter(Box.box_number == box_number)
            .order_by(Box.id)
            .first()
        )
        return BoxOut.model_validate(b) if b else None

    def create_box(self, data: BoxCreate) -> BoxOut:
        now = self._now()
        with unit_of_work(self.db):
            b = Box(
                box_number=data.box_number,
                owner=data.owner,
                room=data.room,
                contents=data.contents,
                status=lifecycle.parse_status(data.status).value,
                position=None,
                created_at=now,
                updated_at=now,
            )
            self.db.add(b)
            self.db.flush()  # ensure id assigned
            self._add_activity(b.id, *lifecycle.created_activity(b.box_number))
        log.debug("created box id=%s number=%s", b.id, b.box_number)
        return BoxOut.model_validate(b)

    def update_box(self, box_id: int, data: BoxUpdate) -> Optional[BoxOut]:
        with unit_of_work(self.db):
            b = self._locked_box(box_id)
            if not b:
                return None
            box_number = b.box_number
            changes = data.model_dump(exclude_unset=True, exclude_none=True)
            if "status" in changes:
                changes["status"] = lifecycle.parse_status(changes["status"]).value
            for field, value in changes.items():
                setattr(b, field, value)
            b.updated_at = self._now()
            self._add_activity(box_id, *lifecycle.updated_activity(box_number))
        return BoxOut.model_validate(b)

    def update_box_position(
        self, box_id: int, position: BoxPosition, status: Optional[BoxStatus] = None
    ) -> Optional[BoxOut]:
        with unit_of_work(self.db):
            b = self._locked_box(box_id)
            if not b:
                return None
            b.position = position.model_dump()
            if status:
                b.status = BoxStatus(status).value
            b.updated_at = self._now()
            self._add_activity(
                box_id, *lifecycle.position_activity(b.box_number, position, status)
            )
        return BoxOut.model_validate(b)

    def update_box_status(self, box_id: int, status: BoxStatus) -> Optional[BoxOut]:
        status = BoxStatus(status)
        with unit_of_work(self.db):
            b = self._locked_box(box_id)
            if not b:
                return None
            if lifecycle.should_clear_position(BoxStatus(b.status), status):
                b.position = None
            b.status = status.value
            b.updated_at = self._now()
            self._add_activity(box_id, *lifecycle.status_activity(b.box_number, status))
        return BoxOut.model_validate(b)

    def delete_box(self, box_id: int) -> bool:
        with unit_of_work(self.db):
            b = self._locked_box(box_id)
            if not b:
                return False
            box_number = b.box_number
            # qr codes go with the box (relationship cascade); activities stay
            self.db.delete(b)
            self.db.flush()
            self._add_activity(box_id, *lifecycle.deleted_activity(box_number))
        log.debug("deleted box id=%s", box_id)
        return True

    # ---- activity log ----

    def _add_activity(self, box_id: Optional[int], type_: str, description: str) -> Activity:
        a = Activity(
            box_id=box_id, type=type_, description=description, timestamp=self._now()
        )
        self.db.add(a)
        self.db.flush()
        return a

    def _newest_first(self):
        return self.db.query(Activity).order_by(
            Activity.timestamp.desc(), Activity.id.desc()
        )

    def list_activities(self, limit: Optional[int] = None) -> List[ActivityOut]:
        limit = lifecycle.activity_limit(limit)
        query = self._newest_first()
        if limit is not None:
            query = query.limit(limit)
        return [ActivityOut.model_validate(a) for a in query.all()]

    def list_box_activities(self, box_id: int) -> List[ActivityOut]:
        if not _storable(box_id):
            return []
        rows = self._newest_first().filter(Activity.box_id == box_id).all()
        return [ActivityOut.model_validate(a) for a in rows]

    def append_activity(self, data: ActivityCreate) -> ActivityOut:
        with unit_of_work(self.db):
            a = self._add_activity(data.box_id, data.type, data.description)
        return ActivityOut.model_validate(a)

    # ---- qr codes ----

    def get_qr_code(self, qr_id: int) -> Optional[QrCodeOut]:
        if not _storable(qr_id):
            return None
        qr = self.db.get(QrCode, qr_id)
        return QrCodeOut.model_validate(qr) if qr else None

    def get_qr_code_by_box_id(self, box_id: int) -> Optional[QrCodeOut]:
        if not _storable(box_id):
            return None
        qr = (
            self.db.query(QrCode)
            .filter(QrCode.box_id == box_id)
            .order_by(QrCode.id)
            .first()
        )
        return QrCodeOut.model_validate(qr) if qr else None

    def create_qr_code(self, data: QrCodeCreate) -> QrCodeOut:
        with unit_of_work(self.db):
            qr = QrCode(box_id=data.box_id, data=data.data, created_at=self._now())
            self.db.add(qr)
            self.db.flush()
        return QrCodeOut.model_validate(qr)

    def get_or_create_qr_code(self, box_id: int, data: str) -> Optional[QrCodeOut]:
        with unit_of_work(self.db):
            # the box row lock serialises concurrent first requests
            b = self._locked_box(box_id)
            if not b:
                return None
            qr = (
                self.db.query(QrCode)
                .filter(QrCode.box_id == box_id)
                .order_by(QrCode.id)
                .first()
            )
            if not qr:
                qr = QrCode(box_id=box_id, data=data, created_at=self._now())
                self.db.add(qr)
                self.db.flush()
        return QrCodeOut.model_validate(qr)

    # ---- owners ----

    def list_owners(self) -> List[OwnerOut]:
        rows = (
            self.db.query(Owner)
            .order_by(Owner.updated_at.desc(), Owner.id.desc())
            .all()
        )
        return [OwnerOut.model_validate(o) for o in rows]

    def get_owner(self, owner_id: int) -> Optional[OwnerOut]:
        if not _storable(owner_id):
            return None
        o = self.db.get(Owner, owner_id)
        return OwnerOut.model_validate(o) if o else None

    def create_owner(self, data: OwnerCreate) -> OwnerOut:
        now = self._now()
        with unit_of_work(self.db):
            o = Owner(name=data.name, color=data.color, created_at=now, updated_at=now)
            self.db.add(o)
            self.db.flush()
        return OwnerOut.model_validate(o)

    def update_owner(self, owner_id: int, data: OwnerUpdate) -> Optional[OwnerOut]:
        with unit_of_work(self.db):
            o = self._locked_owner(owner_id)
            if not o:
                return None
            for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(o, field, value)
            o.updated_at = self._now()
        return OwnerOut.model_validate(o)

    def delete_owner(self, owner_id: int) -> bool:
        with unit_of_work(self.db):
            o = self._locked_owner(owner_id)
            if not o:
                return False
            in_use = (
                self.db.query(Box.id)
                .filter(func.lower(Box.owner) == o.name.lower())
                .first()
            )
            if in_use:
                log.info("refusing to delete owner %r: still assigned to boxes", o.name)
                return False
            self.db.delete(o)
        return True

    def count_boxes(self) -> int:
        return self.db.query(func.count(Box.id)).scalar() or 0

    def count_owners(self) -> int:
        return self.db.query(func.count(Owner.id)).scalar() or 0
