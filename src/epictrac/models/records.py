"""Read-side records returned by epic queries.

These are projections of store rows, built fresh on every query. The ORM
classes in this package describe the store's tables; these dataclasses are
what the eligibility code hands back to callers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, NamedTuple, Optional

from .base import Status, IssueType
from ..storage.errors import MalformedRow

# Columns the store may legitimately leave NULL
OPTIONAL_COLUMNS = ("assignee", "estimated_minutes", "closed_at", "external_ref")

ISSUE_FIELDS = (
    "id", "title", "description", "design", "acceptance_criteria", "notes",
    "status", "priority", "issue_type", "assignee", "estimated_minutes",
    "created_at", "updated_at", "closed_at", "external_ref",
)

_EXPECTED_TYPES = {
    "id": str,
    "title": str,
    "description": str,
    "design": str,
    "acceptance_criteria": str,
    "notes": str,
    "status": Status,
    "priority": int,
    "issue_type": IssueType,
    "assignee": str,
    "estimated_minutes": int,
    "created_at": datetime,
    "updated_at": datetime,
    "closed_at": datetime,
    "external_ref": str,
}


def eligible_for_close(total_children: int, closed_children: int) -> bool:
    """An epic can close once it has children and every one of them is closed.

    A childless epic is never eligible.
    """
    return total_children > 0 and closed_children == total_children


class ChildCounts(NamedTuple):
    """Direct child totals for one epic"""
    total: int
    closed: int

    @property
    def eligible_for_close(self) -> bool:
        return eligible_for_close(self.total, self.closed)


@dataclass(frozen=True)
class IssueRecord:
    """Immutable snapshot of an issue row"""
    id: str
    title: str
    description: str
    design: str
    acceptance_criteria: str
    notes: str
    status: Status
    priority: int
    issue_type: IssueType
    assignee: Optional[str]
    estimated_minutes: Optional[int]
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime]
    external_ref: Optional[str]

    @property
    def is_closed(self) -> bool:
        return self.status == Status.CLOSED

    @classmethod
    def from_row(cls, row: Any) -> "IssueRecord":
        """Decode a result row (anything with attribute access per column).

        Raises MalformedRow for an unexpected NULL or a value of the wrong type.
        """
        row_id = getattr(row, "id", None)
        values = {}
        for name in ISSUE_FIELDS:
            try:
                value = getattr(row, name)
            except AttributeError:
                raise MalformedRow(f"row is missing column {name!r}", column=name, row_id=row_id) from None
            if value is None:
                if name not in OPTIONAL_COLUMNS:
                    raise MalformedRow(
                        f"unexpected NULL in column {name!r} for issue {row_id}",
                        column=name,
                        row_id=row_id,
                    )
            elif not isinstance(value, _EXPECTED_TYPES[name]) or isinstance(value, bool):
                raise MalformedRow(
                    f"column {name!r} for issue {row_id} has type {type(value).__name__}",
                    column=name,
                    row_id=row_id,
                )
            values[name] = value
        return cls(**values)

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "design": self.design,
            "acceptance_criteria": self.acceptance_criteria,
            "notes": self.notes,
            "status": self.status.value,
            "priority": self.priority,
            "issue_type": self.issue_type.value,
            "assignee": self.assignee,
            "estimated_minutes": self.estimated_minutes,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "external_ref": self.external_ref,
        }


@dataclass(frozen=True)
class EpicStatus:
    """An epic annotated with its direct child completion counts"""
    epic: IssueRecord
    total_children: int
    closed_children: int

    def __post_init__(self):
        if self.total_children < 0 or self.closed_children < 0:
            raise ValueError("child counts must be non-negative")
        if self.closed_children > self.total_children:
            raise ValueError(
                f"closed_children ({self.closed_children}) exceeds total_children ({self.total_children})"
            )

    @property
    def eligible_for_close(self) -> bool:
        return eligible_for_close(self.total_children, self.closed_children)

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            "epic": self.epic.to_dict(),
            "total_children": self.total_children,
            "closed_children": self.closed_children,
            "eligible_for_close": self.eligible_for_close,
        }
