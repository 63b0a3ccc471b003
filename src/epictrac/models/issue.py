"""Issue model"""

from sqlalchemy import Column, Integer, String, DateTime, Text

from .base import Base, Status, IssueType, utcnow, value_enum

class Issue(Base):
    """Row in the ``issues`` relation owned by the issue store"""
    
    __tablename__ = "issues"
    
    # Primary fields
    id = Column(String(50), primary_key=True)  # e.g., "ep-a7k2"
    title = Column(String(500), nullable=False)
    description = Column(Text, default="")
    design = Column(Text, default="")
    acceptance_criteria = Column(Text, default="")
    notes = Column(Text, default="")
    
    # Status and type
    status = Column(value_enum(Status), nullable=False, default=Status.OPEN)
    priority = Column(Integer, nullable=False, default=2)  # 0 (highest) to 4 (lowest)
    issue_type = Column(value_enum(IssueType), nullable=False, default=IssueType.TASK)
    
    # Optional fields
    assignee = Column(String(100), nullable=True)
    estimated_minutes = Column(Integer, nullable=True)
    external_ref = Column(String(200), nullable=True)  # e.g., "gh-42"
    
    created_by = Column(String(100), nullable=False, default="local")
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    closed_at = Column(DateTime, nullable=True)
    
    def __repr__(self):
        return f"<Issue(id='{self.id}', title='{self.title[:50]}...', status='{self.status.value}')>"
    
