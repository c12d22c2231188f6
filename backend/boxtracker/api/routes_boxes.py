from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from boxtracker.api.deps import get_repo
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.activity_schema import ActivityOut
from boxtracker.schemas.box_schema import (
    BoxCreate,
    BoxOut,
    BoxUpdate,
    PositionUpdateIn,
    StatusUpdateIn,
)
from boxtracker.schemas.qr_schema import QrCodeOut
from boxtracker.services.qr_service import QrCodeService

router = APIRouter(prefix="/api/boxes", tags=["boxes"])


def _found(box, detail: str = "Box not found"):
    if not box:
        raise HTTPException(status_code=404, detail=detail)
    return box


@router.get("", response_model=List[BoxOut], summary="List boxes, latest update first")
def list_boxes(repo: InventoryRepository = Depends(get_repo)):
    return repo.list_boxes()


@router.post("", response_model=BoxOut, status_code=status.HTTP_201_CREATED)
def create_box(payload: BoxCreate, repo: InventoryRepository = Depends(get_repo)):
    return repo.create_box(payload)


@router.get("/number/{box_number}", response_model=BoxOut)
def get_box_by_number(box_number: int, repo: InventoryRepository = Depends(get_repo)):
    return _found(repo.get_box_by_number(box_number))


@router.get("/{box_id}", response_model=BoxOut)
def get_box(box_id: int, repo: InventoryRepository = Depends(get_repo)):
    return _found(repo.get_box(box_id))


@router.put("/{box_id}", response_model=BoxOut)
def update_box(
    box_id: int, payload: BoxUpdate, repo: InventoryRepository = Depends(get_repo)
):
    return _found(repo.update_box(box_id, payload))


@router.patch("/{box_id}/status", response_model=BoxOut)
def update_box_status(
    box_id: int, payload: StatusUpdateIn, repo: InventoryRepository = Depends(get_repo)
):
    return _found(repo.update_box_status(box_id, payload.status))


@router.patch("/{box_id}/position", response_model=BoxOut)
def update_box_position(
    box_id: int, payload: PositionUpdateIn, repo: InventoryRepository = Depends(get_repo)
):
    return _found(repo.update_box_position(box_id, payload.position, payload.status))


@router.delete("/{box_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_box(box_id: int, repo: InventoryRepository = Depends(get_repo)):
    if not repo.delete_box(box_id):
        raise HTTPException(status_code=404, detail="Box not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{box_id}/activities", response_model=List[ActivityOut])
def list_box_activities(box_id: int, repo: InventoryRepository = Depends(get_repo)):
    return repo.list_box_activities(box_id)


@router.get("/{box_id}/qrcode", response_model=QrCodeOut, summary="Get or create the box QR code")
def get_box_qr_code(box_id: int, repo: InventoryRepository = Depends(get_repo)):
    return _found(QrCodeService(repo).get_or_create(box_id))
