"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, Any

from civicreport.database import init_database
from civicreport.logger import get_logger, reset_logger
from civicreport.models import CandidateIssue, Category, IssueStatus, ReportDraft

# MG Road, Bengaluru; 0.0009 degrees of latitude is roughly 100 m
BASE_LAT = 12.9716
BASE_LON = 77.5946


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger to a temp dir and keep the console clean."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False, level="DEBUG")
    yield logger
    reset_logger()


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def make_candidate(now):
    """Factory for CandidateIssue with sensible defaults."""
    def _make(
        issue_id: str = "issue-1",
        title: str = "Large pothole on Main Street",
        description: str = "Deep pothole near the bus stop causing traffic problems",
        category: Category = Category.ROADS,
        latitude=BASE_LAT,
        longitude=BASE_LON,
        status: IssueStatus = IssueStatus.OPEN,
        created_at=None,
    ) -> CandidateIssue:
        return CandidateIssue(
            id=issue_id,
            title=title,
            description=description,
            category=category,
            created_at=created_at or now - timedelta(days=2),
            status=status,
            latitude=latitude,
            longitude=longitude,
        )
    return _make


@pytest.fixture
def pothole_report() -> ReportDraft:
    """Report about 100 m north of the default candidate."""
    return ReportDraft(
        title="Large pothole on Main St",
        description="Deep pothole causing traffic problems near the bus stop",
        category=Category.ROADS,
        latitude=BASE_LAT + 0.0009,
        longitude=BASE_LON,
    )


@pytest.fixture
def valid_report_data() -> Dict[str, Any]:
    """Valid report submission payload."""
    return {
        "title": "Large pothole on Main St",
        "description": "Deep pothole causing traffic problems near the bus stop",
        "category": "roads",
        "latitude": BASE_LAT + 0.0009,
        "longitude": BASE_LON,
    }


@pytest.fixture
def invalid_report_data() -> Dict[str, Any]:
    """Invalid report (missing description, bad category)."""
    return {
        "title": "Broken pipe",
        "category": "weather",
    }


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Initialized empty SQLite issue store."""
    path = tmp_path / "issues.db"
    init_database(path)
    return path


@pytest.fixture
def report_file(tmp_path, valid_report_data) -> Path:
    path = tmp_path / "report.json"
    path.write_text(json.dumps(valid_report_data))
    return path
