"""Issue containment and close API endpoints"""

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from ..storage.cascade import cascade_close
from ..storage.epic_service import EpicService
from ..storage.issue_service import IssueService
from .deps import get_epic_service, get_issue_service
from .schemas import CloseRequest, CloseResponse, IssueResponse

router = APIRouter()

@router.get("/{issue_id}/parent-epics", response_model=List[IssueResponse])
def parent_epics(issue_id: str, service: EpicService = Depends(get_epic_service)):
    """Epics that directly contain this issue, by priority"""
    return [IssueResponse.model_validate(epic) for epic in service.parent_epics(issue_id)]

@router.post("/{issue_id}/close", response_model=CloseResponse)
def close_issue(
    issue_id: str,
    request: CloseRequest,
    service: EpicService = Depends(get_epic_service),
    issues: IssueService = Depends(get_issue_service),
):
    """Close an issue, then close parent epics that become eligible"""
    if request.cascade:
        closed = cascade_close(service, issues, issue_id, reason=request.reason, actor="api")
    else:
        issue = issues.close_issue(issue_id, reason=request.reason, actor="api")
        closed = [issue.id] if issue else None
    
    if closed is None:
        raise HTTPException(status_code=404, detail=f"Issue {issue_id} not found")
    
    return CloseResponse(closed=closed)
