import re
from typing import Optional

from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.box_schema import BoxOut
from boxtracker.schemas.qr_schema import QrCodeOut
from boxtracker.services.errors import QrCodeFormatError

QR_PREFIX = "boxtracker-"
_QR_PATTERN = re.compile(r"boxtracker-(\d+)")


def qr_data_for(box_id: int) -> str:
    return f"{QR_PREFIX}{box_id}"


def parse_qr_data(data: str) -> Optional[int]:
    """Box id encoded in scanned text, or None if it carries no payload."""
    match = _QR_PATTERN.search(data or "")
    return int(match.group(1)) if match else None


class QrCodeService:
    def __init__(self, repo: InventoryRepository):
        self.repo = repo

    def get_or_create(self, box_id: int) -> Optional[QrCodeOut]:
        """
        Return the box's QR code, creating it on first request.
        None when the box does not exist.
        """
        qr = self.repo.get_qr_code_by_box_id(box_id)
        if qr:
            return qr
        # lookup and insert happen under one store lock, so racing first
        # requests still leave a single record
        return self.repo.get_or_create_qr_code(box_id, qr_data_for(box_id))

    def resolve(self, data: str) -> Optional[BoxOut]:
        box_id = parse_qr_data(data)
        if box_id is None:
            raise QrCodeFormatError(f"Not a box QR code: {data!r}")
        return self.repo.get_box(box_id)
