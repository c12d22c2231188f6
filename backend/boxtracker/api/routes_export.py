from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from boxtracker.api.deps import get_repo
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.box_schema import BoxStatus
from boxtracker.services.export_service import ExportService

router = APIRouter(prefix="/api/export", tags=["export"])


@router.get("/boxes.csv", summary="Export boxes as CSV")
def export_boxes_csv(
    status: Optional[BoxStatus] = Query(None, description="only boxes in this status"),
    repo: InventoryRepository = Depends(get_repo),
):
    svc = ExportService(repo)
    return StreamingResponse(
        iter([svc.boxes_csv(status)]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={svc.export_filename()}"},
    )
