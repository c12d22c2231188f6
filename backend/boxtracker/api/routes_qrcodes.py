from fastapi import APIRouter, Depends, HTTPException

from boxtracker.api.deps import get_repo
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.box_schema import BoxOut
from boxtracker.schemas.qr_schema import QrCodeOut, QrScanIn
from boxtracker.services.errors import QrCodeFormatError
from boxtracker.services.qr_service import QrCodeService

router = APIRouter(prefix="/api/qrcodes", tags=["qrcodes"])


@router.post("/scan", response_model=BoxOut, summary="Resolve scanned QR text to its box")
def scan(payload: QrScanIn, repo: InventoryRepository = Depends(get_repo)):
    try:
        box = QrCodeService(repo).resolve(payload.data)
    except QrCodeFormatError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not box:
        raise HTTPException(status_code=404, detail="Box not found")
    return box


@router.get("/{qr_id}", response_model=QrCodeOut)
def get_qr_code(qr_id: int, repo: InventoryRepository = Depends(get_repo)):
    qr = repo.get_qr_code(qr_id)
    if not qr:
        raise HTTPException(status_code=404, detail="QR code not found")
    return qr
