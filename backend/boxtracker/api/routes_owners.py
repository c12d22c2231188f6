from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from boxtracker.api.deps import get_repo
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.owner_schema import OwnerCreate, OwnerOut, OwnerUpdate

router = APIRouter(prefix="/api/owners", tags=["owners"])


@router.get("", response_model=List[OwnerOut])
def list_owners(repo: InventoryRepository = Depends(get_repo)):
    return repo.list_owners()


@router.get("/{owner_id}", response_model=OwnerOut)
def get_owner(owner_id: int, repo: InventoryRepository = Depends(get_repo)):
    owner = repo.get_owner(owner_id)
    if not owner:
        raise HTTPException(status_code=404, detail="Owner not found")
    return owner


@router.post("", response_model=OwnerOut, status_code=status.HTTP_201_CREATED)
def create_owner(payload: OwnerCreate, repo: InventoryRepository = Depends(get_repo)):
    return repo.create_owner(payload)


@router.put("/{owner_id}", response_model=OwnerOut)
def update_owner(
    owner_id: int, payload: OwnerUpdate, repo: InventoryRepository = Depends(get_repo)
):
    owner = repo.update_owner(owner_id, payload)
    if not owner:
        raise HTTPException(status_code=404, detail="Owner not found")
    return owner


@router.delete("/{owner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_owner(owner_id: int, repo: InventoryRepository = Depends(get_repo)):
    if not repo.get_owner(owner_id):
        raise HTTPException(status_code=404, detail="Owner not found")
    if not repo.delete_owner(owner_id):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete owner - it is in use by one or more boxes",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
