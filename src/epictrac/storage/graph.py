"""Parent-child containment queries over the dependencies relation"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import case, distinct, func, select
from sqlalchemy.orm import Session, aliased

from ..models import ChildCounts, Dependency, DependencyType, Issue, IssueRecord, IssueType, Status
from .errors import MalformedRow
from .context import Context
from .database import Database

logger = logging.getLogger(__name__)

# Issue columns in IssueRecord field order
ISSUE_COLUMNS = (
    Issue.id, Issue.title, Issue.description, Issue.design,
    Issue.acceptance_criteria, Issue.notes, Issue.status, Issue.priority,
    Issue.issue_type, Issue.assignee, Issue.estimated_minutes,
    Issue.created_at, Issue.updated_at, Issue.closed_at, Issue.external_ref,
)


def child_stats(epic_ids: Optional[Iterable[str]] = None):
    """Subquery of direct child totals per parent: (epic_id, total_children, closed_children).

    Only parent-child edges count, grandchildren are not followed, and each
    child is counted once. Parents without children have no row. Restricting
    to ``epic_ids`` filters before grouping.
    """
    child = aliased(Issue, name="child")
    query = (
        select(
            Dependency.depends_on_id.label("epic_id"),
            func.count(distinct(child.id)).label("total_children"),
            func.count(distinct(case((child.status == Status.CLOSED, child.id)))).label("closed_children"),
        )
        .join(child, child.id == Dependency.issue_id)
        .where(Dependency.type == DependencyType.PARENT_CHILD)
        .group_by(Dependency.depends_on_id)
    )
    if epic_ids is not None:
        query = query.where(Dependency.depends_on_id.in_(list(epic_ids)))
    return query.subquery("epic_stats")


def fetch_rows(session: Session, query, operation: str) -> list:
    """Execute and fetch every row up front.

    Values the column types cannot load (an unknown enum value, an unparsable
    timestamp) surface as MalformedRow.
    """
    try:
        return session.execute(query).all()
    except (LookupError, ValueError, TypeError) as exc:
        logger.error("[%s] could not load row: %s", operation, exc)
        raise MalformedRow(f"{operation}: {exc}") from exc


def decode_issues(rows, operation: str) -> List[IssueRecord]:
    """Decode all rows or none"""
    try:
        return [IssueRecord.from_row(row) for row in rows]
    except MalformedRow as exc:
        logger.error("[%s] %s", operation, exc)
        raise


class DependencyGraph:
    """Read access to parent-child edges"""

    def __init__(self, database: Database):
        self.database = database

    def child_counts(self, epic_id: str, ctx: Optional[Context] = None) -> ChildCounts:
        """Direct child totals for one epic; (0, 0) when it has none or does not exist"""
        operation = "CHILD_COUNTS"
        with self.database.read(operation, ctx) as session:
            stats = child_stats([epic_id])
            query = select(stats.c.total_children, stats.c.closed_children)
            rows = fetch_rows(session, query, operation)

            counts = ChildCounts(0, 0)
            if rows:
                total, closed = rows[0]
                if total is None or closed is None:
                    raise MalformedRow(f"{operation}: NULL child count for epic {epic_id}", row_id=epic_id)
                counts = ChildCounts(int(total), int(closed))
            logger.debug("[%s] epic %s: %d/%d children closed", operation, epic_id, counts.closed, counts.total)
            return counts

    def parent_epics(self, issue_id: str, ctx: Optional[Context] = None) -> List[IssueRecord]:
        """Epics that directly contain ``issue_id``, open or closed, by priority"""
        operation = "PARENT_EPICS"
        with self.database.read(operation, ctx) as session:
            query = (
                select(*ISSUE_COLUMNS)
                .select_from(Issue)
                .join(Dependency, Dependency.depends_on_id == Issue.id)
                .where(
                    Dependency.issue_id == issue_id,
                    Dependency.type == DependencyType.PARENT_CHILD,
                    Issue.issue_type == IssueType.EPIC,
                )
                .order_by(Issue.priority.asc(), Issue.id.asc())
            )
            parents = decode_issues(fetch_rows(session, query, operation), operation)
            logger.debug("[%s] issue %s has %d parent epics", operation, issue_id, len(parents))
            return parents
