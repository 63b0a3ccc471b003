"""Pydantic schemas for API requests and responses"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from ..models import Status, IssueType

# Issue schemas
class IssueResponse(BaseModel):
    """Schema for issue responses"""
    id: str
    title: str
    description: str = ""
    design: str = ""
    acceptance_criteria: str = ""
    notes: str = ""
    status: Status
    priority: int = Field(..., description="Priority: 0 (highest) to 4 (lowest)")
    issue_type: IssueType
    assignee: Optional[str] = None
    estimated_minutes: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None
    external_ref: Optional[str] = None

    class Config:
        from_attributes = True

# Epic schemas
class EpicStatusResponse(BaseModel):
    """Schema for an epic annotated with child completion"""
    epic: IssueResponse
    total_children: int = Field(..., ge=0)
    closed_children: int = Field(..., ge=0)
    eligible_for_close: bool

    class Config:
        from_attributes = True

class EligibilityResponse(BaseModel):
    """Schema for single-epic eligibility checks"""
    epic_id: str
    eligible: bool

class CloseRequest(BaseModel):
    """Schema for closing an issue"""
    reason: str = Field("", description="Why the issue is being closed")
    cascade: bool = Field(True, description="Also close parent epics that become eligible")

class CloseResponse(BaseModel):
    """Schema for close responses"""
    closed: List[str] = Field(..., description="Closed issue IDs in closing order")

class ErrorResponse(BaseModel):
    """Schema for error responses"""
    error: str
    detail: Optional[str] = None
