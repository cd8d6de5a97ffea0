"""
Duplicate Detection Orchestrator.

Responsibilities:
- Coordinate candidate selection.
- Invoke scoring logic.
- Apply inclusion and duplicate thresholds.
- Return an explainable DuplicateCheckResult.

Non-Responsibilities:
- No direct store access (goes through a CandidateFetcher).
- No feature computation.
- No mutation of persistent state.

Invariant:
This module must be deterministic given the same inputs, and a failing
candidate fetch must never block a submission: it degrades to an empty
result.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, DuplicateConfig
from ..logger import StructuredLogger, get_logger
from ..models import CandidateIssue, DuplicateCheckResult, ReportDraft, SimilarityMatch
from .candidate_selector import CandidateFetcher, select_candidates
from .scoring import score_candidate


def rank_matches(
    scored: Iterable[SimilarityMatch],
    config: DuplicateConfig = DEFAULT_CONFIG,
) -> Tuple[SimilarityMatch, ...]:
    """Keep matches at or above the inclusion threshold, best first, top N."""
    kept = [m for m in scored if m.similarity >= config.inclusion_threshold]
    # sorted() is stable, so ties keep candidate order
    kept = sorted(kept, key=lambda m: m.similarity, reverse=True)
    return tuple(kept[:config.max_matches])


def classify(
    matches: Tuple[SimilarityMatch, ...],
    config: DuplicateConfig = DEFAULT_CONFIG,
) -> DuplicateCheckResult:
    is_duplicate = bool(matches) and matches[0].similarity >= config.duplicate_threshold
    return DuplicateCheckResult(is_duplicate=is_duplicate, matches=matches)


class DuplicateScorer:
    """
    Decides whether a new report likely duplicates an existing open issue.

    Stateless apart from its collaborators, so one instance can serve
    concurrent callers as long as the fetcher supports concurrent reads.
    """

    def __init__(
        self,
        fetcher: Optional[CandidateFetcher] = None,
        config: DuplicateConfig = DEFAULT_CONFIG,
        logger: Optional[StructuredLogger] = None,
    ):
        self.fetcher = fetcher
        self.config = config
        self.logger = logger or get_logger()

    def check(
        self,
        report: ReportDraft,
        candidates: Optional[Iterable[CandidateIssue]] = None,
        now: Optional[datetime] = None,
    ) -> DuplicateCheckResult:
        """
        Score a report against candidates and classify the outcome.

        Args:
            report: The new report (already validated upstream)
            candidates: Issues to compare against; fetched from the
                configured fetcher when omitted
            now: Reference time for the candidate window (default: now)

        Returns:
            DuplicateCheckResult; empty when candidates cannot be obtained
        """
        self._assert_well_formed(report)
        if candidates is None and self.fetcher is None:
            raise ValueError("No candidates given and no candidate fetcher configured")
        category = report.category.value
        self.logger.record_check(category)

        try:
            pool = self._candidate_pool(report, candidates, now)
        except Exception as e:
            # Detection is advisory: fail open, once, no retry
            self.logger.record_fetch_failure(type(e).__name__)
            self.logger.error(
                f"Candidate fetch failed, skipping duplicate check: {e}",
                category=category,
                error_type=type(e).__name__,
            )
            return DuplicateCheckResult.empty()

        scored: List[SimilarityMatch] = []
        for candidate in pool:
            breakdown = score_candidate(report, candidate, self.config)
            self.logger.debug(
                f"Scored candidate {candidate.id}: {breakdown.explain()}",
                issue_id=candidate.id,
                score=round(breakdown.score, 4),
            )
            scored.append(
                SimilarityMatch(
                    issue_id=candidate.id,
                    title=candidate.title,
                    category=candidate.category,
                    similarity=breakdown.score,
                    distance_km=breakdown.distance_km,
                )
            )
        self.logger.record_candidates_scored(len(scored))

        result = classify(rank_matches(scored, self.config), self.config)
        self.logger.record_matches(len(result.matches))
        if result.is_duplicate:
            self.logger.record_duplicate(category)

        top = result.top_match
        self.logger.info(
            "Duplicate check complete",
            category=category,
            candidates=len(scored),
            matches=len(result.matches),
            is_duplicate=result.is_duplicate,
            top_issue_id=top.issue_id if top else None,
            top_similarity=round(top.similarity, 4) if top else None,
        )
        return result

    def _candidate_pool(
        self,
        report: ReportDraft,
        candidates: Optional[Iterable[CandidateIssue]],
        now: Optional[datetime],
    ) -> List[CandidateIssue]:
        if candidates is not None:
            # Lazy iterables from a store can fail here too
            return list(candidates)
        return select_candidates(self.fetcher, report.category, self.config, now)

    def _assert_well_formed(self, report: ReportDraft) -> None:
        # Bounds are enforced by schema.validate_report before check() is called
        if report.latitude is not None:
            assert -90.0 <= report.latitude <= 90.0, f"latitude out of range: {report.latitude}"
        if report.longitude is not None:
            assert -180.0 <= report.longitude <= 180.0, f"longitude out of range: {report.longitude}"
        limit = self.config.max_text_length
        assert len(report.title) <= limit, f"title longer than {limit} characters"
        assert len(report.description) <= limit, f"description longer than {limit} characters"


def format_distance(km: float) -> str:
    """'120m' below one kilometre, '1.5km' from there on."""
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f}km"


def describe_result(result: DuplicateCheckResult) -> str:
    """Human-readable warning for a check result, one match per line."""
    if not result.matches:
        return "No similar issues found."

    if result.is_duplicate:
        lines = [
            "Potential Duplicate Detected!",
            "This issue appears very similar to an existing report. Please check before submitting.",
        ]
    else:
        lines = [
            "Similar Issues Found",
            "We found some similar issues that might be related to your report.",
        ]

    for match in result.matches:
        line = f" - {match.title} [{match.category.value}] {round(match.similarity * 100)}% similar"
        if match.distance_km is not None:
            line += f", {format_distance(match.distance_km)} away"
        line += f" (id: {match.issue_id})"
        lines.append(line)
    return "\n".join(lines)
