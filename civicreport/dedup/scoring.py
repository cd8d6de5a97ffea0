"""
Scoring Logic for duplicate detection.

Responsibilities:
- Compute a deterministic fused score between a new report and one candidate.
- Emit a score breakdown and explanation.

Non-Responsibilities:
- No store access.
- No candidate selection.
- No threshold decisions.

Invariant:
Given identical inputs, this module must always return
the same score and explanation.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, DuplicateConfig
from ..models import CandidateIssue, ReportDraft
from .features import distance_km, text_similarity


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-term contributions to one candidate's fused score."""

    distance_km: Optional[float]
    location_score: float
    title_similarity: float
    title_score: float
    description_similarity: float
    description_score: float
    score: float

    @property
    def within_proximity(self) -> bool:
        return self.location_score > 0

    def explain(self) -> str:
        if self.distance_km is None:
            location = "location: n/a"
        elif self.within_proximity:
            location = f"location: {self.distance_km:.3f}km (+{self.location_score:.2f})"
        else:
            location = f"location: {self.distance_km:.3f}km (+0.00)"
        return (
            f"{location}, "
            f"title: {self.title_similarity:.2f} (+{self.title_score:.2f}), "
            f"description: {self.description_similarity:.2f} (+{self.description_score:.2f}) "
            f"=> {self.score:.3f}"
        )


def score_candidate(
    report: ReportDraft,
    candidate: CandidateIssue,
    config: DuplicateConfig = DEFAULT_CONFIG,
) -> ScoreBreakdown:
    """
    Fuse location, title and description similarity into one score.

    The location term is all-or-nothing: the full weight when both sides
    have coordinates within config.proximity_km, else exactly 0. A missing
    location on either side never estimates and never raises.

    Args:
        report: The new report
        candidate: An existing issue
        config: Weights and proximity radius

    Returns:
        ScoreBreakdown whose score is clamped to [0, 1]
    """
    distance: Optional[float] = None
    location_score = 0.0
    if report.has_location and candidate.has_location:
        distance = distance_km(
            report.latitude, report.longitude,
            candidate.latitude, candidate.longitude,
        )
        if distance <= config.proximity_km:
            location_score = config.location_weight

    title_sim = text_similarity(report.title, candidate.title)
    desc_sim = text_similarity(report.description, candidate.description)
    title_score = title_sim * config.title_weight
    desc_score = desc_sim * config.description_weight

    score = min(1.0, max(0.0, location_score + title_score + desc_score))

    return ScoreBreakdown(
        distance_km=distance,
        location_score=location_score,
        title_similarity=title_sim,
        title_score=title_score,
        description_similarity=desc_sim,
        description_score=desc_score,
        score=score,
    )
