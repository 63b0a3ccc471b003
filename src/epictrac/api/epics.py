"""Epic eligibility API endpoints"""

from fastapi import APIRouter, Depends, Query
from typing import List

from ..storage.epic_service import EpicService
from .deps import get_epic_service
from .schemas import EpicStatusResponse, EligibilityResponse

router = APIRouter()

@router.get("/status", response_model=List[EpicStatusResponse])
def epic_status(
    eligible_only: bool = Query(False, description="Only return epics that can be closed"),
    service: EpicService = Depends(get_epic_service),
):
    """Open epics with their child completion counts
    
    - Sorted by priority, then creation time
    - Closed epics are not listed
    - Epics without children are listed but never eligible
    """
    statuses = service.list_eligible_epics()
    if eligible_only:
        statuses = [status for status in statuses if status.eligible_for_close]
    return [EpicStatusResponse.model_validate(status) for status in statuses]

@router.get("/{epic_id}/eligible", response_model=EligibilityResponse)
def epic_eligible(epic_id: str, service: EpicService = Depends(get_epic_service)):
    """Whether the epic has children and all of them are closed"""
    return EligibilityResponse(epic_id=epic_id, eligible=service.is_eligible(epic_id))
