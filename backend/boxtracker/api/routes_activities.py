from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from boxtracker.api.deps import get_repo
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.activity_schema import ActivityCreate, ActivityOut

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.get("", response_model=List[ActivityOut], summary="Activity log, newest first")
def list_activities(
    limit: Optional[int] = Query(None, ge=1, description="return at most this many"),
    repo: InventoryRepository = Depends(get_repo),
):
    return repo.list_activities(limit)


@router.post("", response_model=ActivityOut, status_code=status.HTTP_201_CREATED)
def create_activity(payload: ActivityCreate, repo: InventoryRepository = Depends(get_repo)):
    return repo.append_activity(payload)
