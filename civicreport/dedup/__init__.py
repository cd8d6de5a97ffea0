from .candidate_selector import CandidateFetcher, build_candidate_query, select_candidates
from .features import distance_km, text_similarity
from .resolver import DuplicateScorer, describe_result
from .scoring import ScoreBreakdown, score_candidate

__all__ = [
    "CandidateFetcher",
    "DuplicateScorer",
    "ScoreBreakdown",
    "build_candidate_query",
    "describe_result",
    "distance_km",
    "score_candidate",
    "select_candidates",
    "text_similarity",
]
