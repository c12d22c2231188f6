import csv
import io
from datetime import datetime, timezone
from typing import Optional

from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.box_schema import BoxStatus
from boxtracker.services.lifecycle import position_label

EXPORT_COLUMNS = ["Box #", "Owner", "Room", "Contents", "Status", "Location"]


class ExportService:
    def __init__(self, repo: InventoryRepository):
        self.repo = repo

    def export_filename(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"boxtracker_export_{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"

    def boxes_csv(self, status: Optional[BoxStatus] = None) -> str:
        """Flat CSV of boxes (optionally one status), newest update first."""
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(EXPORT_COLUMNS)
        for box in self.repo.list_boxes():
            if status and box.status != status:
                continue
            writer.writerow(
                [
                    box.box_number,
                    box.owner,
                    box.room,
                    box.contents,
                    box.status.value,
                    position_label(box.position),
                ]
            )
        return output.getvalue()
