"""
Candidate Selection Logic.

Responsibilities:
- Describe the bounded set of issues a report is compared against.
- Ask a CandidateFetcher (the issue store) for them.

Non-Responsibilities:
- No scoring.
- No similarity computation.
- No duplicate decisions.

Invariant:
Candidate selection must never exclude a valid match.
It may include false positives but never false negatives.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, List, Optional, Protocol, Sequence

from ..config import DEFAULT_CONFIG, DuplicateConfig
from ..models import CandidateIssue, Category, IssueStatus

EXCLUDED_STATUSES: FrozenSet[IssueStatus] = frozenset({IssueStatus.RESOLVED})


class CandidateFetcher(Protocol):
    """
    Anything that can list recent issues for comparison.

    `since` is naive local time unless it carries a tzinfo; remote stores
    convert it to UTC before sending.
    """

    def fetch_candidates(
        self,
        category: Category,
        since: datetime,
        exclude_statuses: FrozenSet[IssueStatus],
        limit: int,
    ) -> Sequence[CandidateIssue]:
        ...


@dataclass(frozen=True)
class CandidateQuery:
    category: Category
    since: datetime
    exclude_statuses: FrozenSet[IssueStatus]
    limit: int


def build_candidate_query(
    category: Category,
    config: DuplicateConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> CandidateQuery:
    """Same category, created in the last config.window_days, not resolved."""
    now = now or datetime.now()
    return CandidateQuery(
        category=category,
        since=now - timedelta(days=config.window_days),
        exclude_statuses=EXCLUDED_STATUSES,
        limit=config.candidate_limit,
    )


def select_candidates(
    fetcher: CandidateFetcher,
    category: Category,
    config: DuplicateConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> List[CandidateIssue]:
    """
    Fetch candidates for a report category.

    Failures from the fetcher propagate; the caller decides how to degrade.
    """
    query = build_candidate_query(category, config, now)
    return list(
        fetcher.fetch_candidates(
            query.category,
            query.since,
            query.exclude_statuses,
            query.limit,
        )
    )
