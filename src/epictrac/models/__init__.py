"""epictrac models package"""

from .base import Base, Status, IssueType, DependencyType
from .issue import Issue
from .dependency import Dependency
from .records import IssueRecord, EpicStatus, ChildCounts, eligible_for_close

__all__ = [
    "Base",
    "Status", 
    "IssueType", 
    "DependencyType", 
    "Issue",
    "Dependency", 
    "IssueRecord",
    "EpicStatus",
    "ChildCounts",
    "eligible_for_close",
]
