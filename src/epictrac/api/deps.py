"""FastAPI dependency providers"""

from ..storage.database import get_database
from ..storage.epic_service import EpicService
from ..storage.issue_service import IssueService


def get_epic_service() -> EpicService:
    return EpicService(get_database())


def get_issue_service() -> IssueService:
    return IssueService(get_database())
