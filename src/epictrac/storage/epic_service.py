"""Epic closure eligibility"""

import logging
from typing import List, Optional

from sqlalchemy import func, select

from ..models import EpicStatus, Issue, IssueRecord, IssueType, Status
from .context import Context
from .database import Database
from .errors import MalformedRow
from .graph import ISSUE_COLUMNS, DependencyGraph, child_stats, decode_issues, fetch_rows

logger = logging.getLogger(__name__)


class EpicService:
    """Answers which epics can be closed based on their direct children.

    Every answer is computed from the store at call time. The bulk listing and
    the single-epic check share ``child_stats`` and ``eligible_for_close``, so
    they agree for any open epic read at the same point in time.
    """

    def __init__(self, database: Database):
        self.database = database
        self.graph = DependencyGraph(database)

    def list_eligible_epics(self, ctx: Optional[Context] = None) -> List[EpicStatus]:
        """All open epics annotated with child counts and eligibility.

        Closed epics are left out. Epics without children are included and are
        never eligible. Ordered by priority, then creation time.
        """
        operation = "ELIGIBLE_EPICS"
        with self.database.read(operation, ctx) as session:
            stats = child_stats()
            query = (
                select(
                    *ISSUE_COLUMNS,
                    func.coalesce(stats.c.total_children, 0).label("total_children"),
                    func.coalesce(stats.c.closed_children, 0).label("closed_children"),
                )
                .select_from(Issue)
                .outerjoin(stats, stats.c.epic_id == Issue.id)
                .where(Issue.issue_type == IssueType.EPIC, Issue.status != Status.CLOSED)
                .order_by(Issue.priority.asc(), Issue.created_at.asc())
            )
            rows = fetch_rows(session, query, operation)
            epics = decode_issues(rows, operation)

            results = []
            for epic, row in zip(epics, rows):
                try:
                    results.append(EpicStatus(
                        epic=epic,
                        total_children=int(row.total_children),
                        closed_children=int(row.closed_children),
                    ))
                except (TypeError, ValueError) as exc:
                    logger.error("[%s] bad child counts for epic %s: %s", operation, epic.id, exc)
                    raise MalformedRow(f"{operation}: {exc}", row_id=epic.id) from exc

            eligible = sum(1 for status in results if status.eligible_for_close)
            logger.debug("[%s] %d open epics, %d eligible for close", operation, len(results), eligible)
            return results

    def is_eligible(self, epic_id: str, ctx: Optional[Context] = None) -> bool:
        """Whether ``epic_id`` has children and all of them are closed.

        The epic's own status is not consulted, so a closed epic still gets an
        answer based on its children.
        """
        counts = self.graph.child_counts(epic_id, ctx)
        eligible = counts.eligible_for_close
        logger.debug("[EPIC_ELIGIBLE] epic %s eligible=%s", epic_id, eligible)
        return eligible

    def parent_epics(self, issue_id: str, ctx: Optional[Context] = None) -> List[IssueRecord]:
        """Direct parent epics of ``issue_id``; see DependencyGraph.parent_epics"""
        return self.graph.parent_epics(issue_id, ctx)
