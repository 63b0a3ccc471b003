"""Dependency edge write side"""

import logging
from typing import Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session

from ..models import Dependency, DependencyType, Issue
from .database import Database, get_database

logger = logging.getLogger(__name__)


class DependencyService:
    """Service class for dependency operations"""

    def __init__(self, database: Optional[Database] = None):
        self._database = database

    @property
    def database(self) -> Database:
        return self._database or get_database()

    def add_dependency(
        self,
        issue_id: str,
        depends_on_id: str,
        dependency_type: DependencyType = DependencyType.BLOCKS,
        actor: str = "system"
    ) -> Optional[Dependency]:
        """Add a dependency between two issues.

        Returns None when either issue is missing and the existing edge when
        the pair is already linked. Raises ValueError for self-edges and
        cycles.
        """

        if issue_id == depends_on_id:
            raise ValueError(f"Issue {issue_id} cannot depend on itself")

        with self.database.session("ADD_DEPENDENCY") as session:
            # Check if both issues exist
            issue = session.get(Issue, issue_id)
            depends_on_issue = session.get(Issue, depends_on_id)

            if not issue or not depends_on_issue:
                return None

            # One edge per pair, whatever its type
            existing = session.get(Dependency, (issue_id, depends_on_id))
            if existing:
                session.expunge(existing)
                return existing

            if self._would_create_cycle(session, issue_id, depends_on_id, dependency_type):
                raise ValueError("Adding dependency would create a circular dependency")

            dependency = Dependency(
                issue_id=issue_id,
                depends_on_id=depends_on_id,
                type=dependency_type,
                created_by=actor
            )

            session.add(dependency)
            session.commit()
            session.refresh(dependency)
            session.expunge(dependency)
            logger.info("Added %s edge %s -> %s", dependency_type.value, issue_id, depends_on_id)
            return dependency

    def add_child(self, parent_id: str, child_id: str, actor: str = "system") -> Optional[Dependency]:
        """Link ``child_id`` under ``parent_id`` with a parent-child edge"""
        return self.add_dependency(child_id, parent_id, DependencyType.PARENT_CHILD, actor)

    def remove_dependency(
        self,
        issue_id: str,
        depends_on_id: str,
        dependency_type: Optional[DependencyType] = None,
        actor: str = "system"
    ) -> bool:
        """Remove a dependency between two issues"""

        with self.database.session("REMOVE_DEPENDENCY") as session:
            query = session.query(Dependency).filter(
                and_(
                    Dependency.issue_id == issue_id,
                    Dependency.depends_on_id == depends_on_id
                )
            )

            if dependency_type:
                query = query.filter(Dependency.type == dependency_type)

            dependency = query.first()
            if not dependency:
                return False

            session.delete(dependency)
            session.commit()
            logger.info("Removed edge %s -> %s by %s", issue_id, depends_on_id, actor)
            return True

    def _would_create_cycle(self, session: Session, from_id: str, to_id: str, dependency_type: DependencyType) -> bool:
        """Check if adding from_id -> to_id would close a loop of the same edge type"""

        # Start from to_id and see if we can reach from_id
        visited = set()
        queue = [to_id]

        while queue:
            current_id = queue.pop(0)

            if current_id in visited:
                continue
            visited.add(current_id)

            if current_id == from_id:
                return True

            targets = (
                session.query(Dependency.depends_on_id)
                .filter(
                    and_(
                        Dependency.issue_id == current_id,
                        Dependency.type == dependency_type
                    )
                )
                .all()
            )

            for (target_id,) in targets:
                if target_id not in visited:
                    queue.append(target_id)

        return False

