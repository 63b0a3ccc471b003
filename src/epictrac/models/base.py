"""Base SQLAlchemy models and configuration"""

from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
import enum

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how SQLite stores DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def value_enum(enum_class) -> Enum:
    """Column type that persists an enum by value ("parent-child"), not by name"""
    return Enum(enum_class, values_callable=lambda members: [m.value for m in members])


class Status(enum.Enum):
    """Issue status enumeration"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    CLOSED = "closed"

class IssueType(enum.Enum):
    """Issue type enumeration"""
    BUG = "bug"
    FEATURE = "feature"
    TASK = "task"
    EPIC = "epic"
    CHORE = "chore"

class DependencyType(enum.Enum):
    """Dependency type enumeration"""
    BLOCKS = "blocks"
    RELATED = "related"
    PARENT_CHILD = "parent-child"
    DISCOVERED_FROM = "discovered-from"
