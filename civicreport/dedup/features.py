"""
Feature Extraction for duplicate detection.

Responsibilities:
- Great-circle distance between two coordinates.
- Lexical similarity between two texts (word overlap, edit distance).

Non-Responsibilities:
- No weighting logic.
- No threshold logic.
- No decision on whether coordinates are present.

Invariant:
Every function here is pure and symmetric in its two inputs.
"""

import math

from rapidfuzz.distance import Levenshtein

from ..normalize import normalize_text, tokenize

EARTH_RADIUS_KM = 6371.0


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometres between two points given in degrees.

    Callers must only pass real coordinates; absence of a location is
    handled by the scorer.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    # Rounding can push a marginally above 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def word_overlap_ratio(a: str, b: str) -> float:
    """Shared distinct words divided by the larger word-set size."""
    words_a = tokenize(a)
    words_b = tokenize(b)
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / max(len(words_a), len(words_b))


def levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance with unit cost for insertion, deletion and substitution.

    Time is O(n*m): callers must bound their inputs (reports are capped at
    5000 characters).
    """
    return Levenshtein.distance(a, b)


def levenshtein_similarity(a: str, b: str) -> float:
    """1 - distance / len(longer), on already-normalized strings."""
    if not a and not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


def text_similarity(a: str, b: str) -> float:
    """
    Combined lexical similarity in [0, 1].

    Both texts are lowercased and trimmed. Empty text never matches, equal
    text scores 1, otherwise the more generous of word overlap and
    normalized edit distance wins, so a reworded report that keeps the key
    nouns still scores well.
    """
    s1 = normalize_text(a or "")
    s2 = normalize_text(b or "")

    if not s1 or not s2:
        return 0.0
    if s1 == s2:
        return 1.0

    score = max(word_overlap_ratio(s1, s2), levenshtein_similarity(s1, s2))
    return min(1.0, max(0.0, score))
