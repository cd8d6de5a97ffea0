"""
Tests for candidate selection.
"""

from datetime import timedelta

import pytest

from civicreport.config import DuplicateConfig
from civicreport.dedup.candidate_selector import (
    EXCLUDED_STATUSES,
    build_candidate_query,
    select_candidates,
)
from civicreport.models import Category, IssueStatus


class TestBuildCandidateQuery:
    """Test the candidate window."""

    def test_defaults(self, now):
        query = build_candidate_query(Category.WATER, now=now)
        assert query.category == Category.WATER
        assert query.since == now - timedelta(days=30)
        assert query.exclude_statuses == frozenset({IssueStatus.RESOLVED})
        assert query.limit == 100

    def test_in_progress_not_excluded(self):
        assert IssueStatus.IN_PROGRESS not in EXCLUDED_STATUSES
        assert IssueStatus.OPEN not in EXCLUDED_STATUSES


class TestSelectCandidates:
    """Test fetching through a CandidateFetcher."""

    def test_materializes_fetcher_output(self, make_candidate, now):
        class GeneratorFetcher:
            def fetch_candidates(self, category, since, exclude_statuses, limit):
                yield make_candidate(issue_id="a")
                yield make_candidate(issue_id="b")

        candidates = select_candidates(GeneratorFetcher(), Category.ROADS, now=now)
        assert [c.id for c in candidates] == ["a", "b"]

    def test_fetcher_errors_propagate(self, now):
        class BrokenFetcher:
            def fetch_candidates(self, category, since, exclude_statuses, limit):
                raise TimeoutError("slow store")

        with pytest.raises(TimeoutError):
            select_candidates(BrokenFetcher(), Category.ROADS, DuplicateConfig(), now=now)
