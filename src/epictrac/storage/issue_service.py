"""Issue store write side: create, fetch and close issues"""

import logging
from typing import Optional

from ..models import Issue, IssueType, Status
from ..models.base import utcnow
from .config import get_project_config
from .database import Database, get_database
from .id_generator import generate_issue_id

logger = logging.getLogger(__name__)


class IssueService:
    """Service class for issue operations"""

    def __init__(self, database: Optional[Database] = None, prefix: Optional[str] = None):
        self._database = database
        self._prefix = prefix

    @property
    def database(self) -> Database:
        return self._database or get_database()

    @property
    def prefix(self) -> str:
        return self._prefix or get_project_config()["project_prefix"]
    
    def create_issue(
        self, 
        title: str,
        description: str = "",
        design: str = "",
        acceptance_criteria: str = "",
        notes: str = "",
        priority: int = 2,
        issue_type: IssueType = IssueType.TASK,
        assignee: Optional[str] = None,
        estimated_minutes: Optional[int] = None,
        external_ref: Optional[str] = None,
        actor: str = "system"
    ) -> Issue:
        """Create a new issue"""
        
        with self.database.session("CREATE_ISSUE") as session:
            issue = Issue(
                id=generate_issue_id(session, self.prefix),
                title=title,
                description=description,
                design=design,
                acceptance_criteria=acceptance_criteria,
                notes=notes,
                status=Status.OPEN,
                priority=priority,
                issue_type=issue_type,
                assignee=assignee,
                estimated_minutes=estimated_minutes,
                external_ref=external_ref,
                created_by=actor,
            )
            
            session.add(issue)
            session.commit()
            session.refresh(issue)
            # Make issue accessible outside session
            session.expunge(issue)
            logger.info("Created %s issue %s (%s)", issue_type.value, issue.id, title)
            return issue
    
    def get_issue(self, issue_id: str) -> Optional[Issue]:
        """Get issue by ID"""
        with self.database.session("GET_ISSUE") as session:
            issue = session.get(Issue, issue_id)
            if issue:
                session.expunge(issue)
            return issue
    
    def close_issue(self, issue_id: str, reason: str = "", actor: str = "system") -> Optional[Issue]:
        """Close an issue; closing an already closed issue leaves it unchanged"""
        
        with self.database.session("CLOSE_ISSUE") as session:
            issue = session.get(Issue, issue_id)
            if not issue:
                return None
            
            if issue.status != Status.CLOSED:
                now = utcnow()
                issue.status = Status.CLOSED
                issue.closed_at = now
                issue.updated_at = now
                session.commit()
                logger.info("Closed issue %s by %s%s", issue_id, actor, f": {reason}" if reason else "")
            
            session.refresh(issue)
            session.expunge(issue)
            return issue
    
    def reopen_issue(self, issue_id: str, actor: str = "system") -> Optional[Issue]:
        """Reopen a closed issue"""
        
        with self.database.session("REOPEN_ISSUE") as session:
            issue = session.get(Issue, issue_id)
            if not issue or issue.status != Status.CLOSED:
                return None
            
            issue.status = Status.OPEN
            issue.closed_at = None
            issue.updated_at = utcnow()
            session.commit()
            logger.info("Reopened issue %s by %s", issue_id, actor)
            
            session.refresh(issue)
            session.expunge(issue)
            return issue

