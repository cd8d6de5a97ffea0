"""
Issues Repository.

Responsibilities:
- CRUD operations for the issues table.
- Serve duplicate-detection candidates (CandidateFetcher protocol).
- Transaction-safe writes.

Non-Responsibilities:
- No business logic.
- No similarity scoring.
- No duplicate decisions.

Invariant:
Repositories must not encode domain decisions.
"""

from datetime import datetime
from pathlib import Path
from typing import FrozenSet, List, Optional

from ..database import Issue, get_session
from ..models import CandidateIssue, Category, IssueStatus


class IssueRepository:
    """SQLite-backed issue store."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def add_issue(
        self,
        title: str,
        description: str,
        category: Category,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        status: IssueStatus = IssueStatus.OPEN,
        created_at: Optional[datetime] = None,
        issue_id: Optional[str] = None,
    ) -> str:
        """
        Insert an issue and return its id.

        Raises:
            sqlalchemy.exc.IntegrityError: If issue_id already exists
        """
        session = get_session(self.db_path)
        try:
            now = created_at or datetime.now()
            issue = Issue(
                title=title,
                description=description,
                category=category.value,
                latitude=latitude,
                longitude=longitude,
                status=status.value,
                created_at=now,
                updated_at=now,
            )
            if issue_id:
                issue.id = issue_id
            session.add(issue)
            session.commit()
            return issue.id
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_issue(self, issue_id: str) -> Optional[CandidateIssue]:
        session = get_session(self.db_path)
        try:
            issue = session.query(Issue).filter_by(id=issue_id).first()
            return issue.to_candidate() if issue else None
        finally:
            session.close()

    def list_issues(
        self,
        category: Optional[Category] = None,
        include_resolved: bool = False,
    ) -> List[CandidateIssue]:
        """All issues, newest first, optionally narrowed to one category."""
        session = get_session(self.db_path)
        try:
            query = session.query(Issue)
            if category is not None:
                query = query.filter(Issue.category == category.value)
            if not include_resolved:
                query = query.filter(Issue.status != IssueStatus.RESOLVED.value)
            return [row.to_candidate() for row in query.order_by(Issue.created_at.desc()).all()]
        finally:
            session.close()

    def update_status(self, issue_id: str, status: IssueStatus) -> bool:
        """Set an issue's status. Returns False when the issue does not exist."""
        session = get_session(self.db_path)
        try:
            issue = session.query(Issue).filter_by(id=issue_id).first()
            if issue is None:
                return False
            issue.status = status.value
            session.commit()
            return True
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def fetch_candidates(
        self,
        category: Category,
        since: datetime,
        exclude_statuses: FrozenSet[IssueStatus],
        limit: int,
    ) -> List[CandidateIssue]:
        """Same-category issues created at or after `since`, newest first."""
        session = get_session(self.db_path)
        try:
            query = (
                session.query(Issue)
                .filter(Issue.category == category.value)
                .filter(Issue.created_at >= since)
            )
            if exclude_statuses:
                query = query.filter(Issue.status.notin_([s.value for s in exclude_statuses]))
            rows = query.order_by(Issue.created_at.desc()).limit(limit).all()
            return [row.to_candidate() for row in rows]
        finally:
            session.close()
