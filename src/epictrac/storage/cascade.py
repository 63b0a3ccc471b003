"""Closing epics upward after a child closes.

The eligibility core only answers questions about one containment level. The
helpers here are the caller side: ``parent_checks`` runs the two-step check
for one issue, and ``cascade_close`` repeats it level by level, closing each
eligible parent through the issue service.

Two sibling children closed concurrently can each observe the parent as not
yet eligible. Nothing here serializes those writers, so callers that need the
close to happen should re-run ``close_eligible_epics`` periodically.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from ..models import EpicStatus, IssueRecord
from .context import Context
from .epic_service import EpicService
from .issue_service import IssueService

logger = logging.getLogger(__name__)

AUTO_CLOSE_REASON = "Auto-closed: all child issues closed"


@dataclass(frozen=True)
class ParentCheck:
    """A direct parent epic and whether it can close now"""
    epic: IssueRecord
    eligible: bool

    @property
    def should_close(self) -> bool:
        return self.eligible and not self.epic.is_closed


def parent_checks(service: EpicService, issue_id: str, ctx: Optional[Context] = None) -> List[ParentCheck]:
    """Eligibility of every direct parent epic of ``issue_id``, in parent_epics order"""
    return [
        ParentCheck(epic=epic, eligible=service.is_eligible(epic.id, ctx))
        for epic in service.parent_epics(issue_id, ctx)
    ]


def cascade_close(
    service: EpicService,
    issues: IssueService,
    issue_id: str,
    reason: str = "",
    actor: str = "system",
    ctx: Optional[Context] = None,
) -> Optional[List[str]]:
    """Close ``issue_id`` and then every parent epic this makes eligible.

    Returns the closed ids in closing order, starting with ``issue_id``, or
    None when the issue does not exist. Parents that are already closed are
    left alone and not walked through.
    """
    if issues.close_issue(issue_id, reason=reason, actor=actor) is None:
        return None

    closed = [issue_id]
    pending = deque([issue_id])
    while pending:
        current = pending.popleft()
        for check in parent_checks(service, current, ctx):
            if not check.should_close:
                continue
            issues.close_issue(check.epic.id, reason=AUTO_CLOSE_REASON, actor=actor)
            logger.info("[CASCADE] closed epic %s after %s closed", check.epic.id, current)
            closed.append(check.epic.id)
            pending.append(check.epic.id)

    return closed


def close_eligible_epics(
    service: EpicService,
    issues: IssueService,
    actor: str = "system",
    dry_run: bool = False,
    ctx: Optional[Context] = None,
) -> List[EpicStatus]:
    """Close every open epic that is eligible right now.

    This is the periodic re-scan that catches closes missed by racing writers.
    Returns the statuses of the epics that were (or, with ``dry_run``, would
    be) closed. Epics that become eligible because of these closes are picked
    up by the next scan.
    """
    eligible = [status for status in service.list_eligible_epics(ctx) if status.eligible_for_close]
    if dry_run:
        return eligible

    for status in eligible:
        issues.close_issue(status.epic.id, reason=AUTO_CLOSE_REASON, actor=actor)
        logger.info(
            "[CASCADE] closed eligible epic %s (%d/%d children closed)",
            status.epic.id, status.closed_children, status.total_children,
        )
    return eligible
