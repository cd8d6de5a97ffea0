"""
Database schema and connection management.

Uses SQLite with SQLAlchemy as a local issue store.
"""

import uuid
from datetime import datetime
from pathlib import Path

from sqlalchemy import Column, DateTime, Float, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .models import CandidateIssue, Category, IssueStatus

Base = declarative_base()


def _new_issue_id() -> str:
    return str(uuid.uuid4())


class Issue(Base):
    """Reported civic issue."""

    __tablename__ = "issues"

    id = Column(String, primary_key=True, default=_new_issue_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)  # roads, garbage, water, electricity, other
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    status = Column(String, nullable=False, default=IssueStatus.OPEN.value)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    def to_candidate(self) -> CandidateIssue:
        return CandidateIssue(
            id=self.id,
            title=self.title,
            description=self.description,
            category=Category(self.category),
            created_at=self.created_at,
            status=IssueStatus(self.status),
            latitude=self.latitude,
            longitude=self.longitude,
        )


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
