"""
Domain types for duplicate-report detection.

ReportDraft is built by the caller from a submission and never persisted here.
CandidateIssue mirrors a row owned by the issue store; this package only reads it.
SimilarityMatch and DuplicateCheckResult are produced fresh on every check.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Category(str, Enum):
    ROADS = "roads"
    GARBAGE = "garbage"
    WATER = "water"
    ELECTRICITY = "electricity"
    OTHER = "other"


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


def _has_coordinates(latitude: Optional[float], longitude: Optional[float]) -> bool:
    # 0.0 is a real coordinate, only None means absent
    return latitude is not None and longitude is not None


@dataclass(frozen=True)
class ReportDraft:
    """A newly submitted issue, before it is stored."""

    title: str
    description: str
    category: Category
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return _has_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class CandidateIssue:
    """An existing issue considered as a possible duplicate."""

    id: str
    title: str
    description: str
    category: Category
    created_at: datetime
    status: IssueStatus = IssueStatus.OPEN
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_location(self) -> bool:
        return _has_coordinates(self.latitude, self.longitude)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CandidateIssue":
        """
        Build a candidate from a store row (dict with the issues table columns).

        created_at may be a datetime or an ISO-8601 string; a trailing "Z"
        is accepted. Status and category go through the same synonym tables
        as user input, so the app's "pending" reads as open.

        Raises:
            ValueError: On a missing created_at, unknown category or status
            KeyError: On a missing id or category
        """
        # normalize imports this module
        from .normalize import normalize_category, normalize_status

        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))
        if created_at is None:
            raise ValueError(f"Issue {row.get('id')!r} has no created_at")

        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            description=row.get("description") or "",
            category=normalize_category(row["category"]),
            created_at=created_at,
            status=normalize_status(row.get("status")),
            latitude=_optional_float(row.get("latitude")),
            longitude=_optional_float(row.get("longitude")),
        )


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class SimilarityMatch:
    issue_id: str
    title: str
    category: Category
    similarity: float
    distance_km: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.issue_id,
            "title": self.title,
            "category": self.category.value,
            "similarity": round(self.similarity, 4),
        }
        if self.distance_km is not None:
            data["distance_km"] = round(self.distance_km, 4)
        return data


@dataclass(frozen=True)
class DuplicateCheckResult:
    is_duplicate: bool = False
    matches: Tuple[SimilarityMatch, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "DuplicateCheckResult":
        return cls(is_duplicate=False, matches=())

    @property
    def top_match(self) -> Optional[SimilarityMatch]:
        return self.matches[0] if self.matches else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_duplicate": self.is_duplicate,
            "similar_issues": [m.to_dict() for m in self.matches],
        }
