"""
Tests for distance and text similarity features.
"""

import math

import pytest

from civicreport.dedup.features import (
    EARTH_RADIUS_KM,
    distance_km,
    levenshtein_distance,
    levenshtein_similarity,
    text_similarity,
    word_overlap_ratio,
)


class TestDistanceKm:
    """Test haversine distance."""

    @pytest.mark.parametrize("lat, lon", [
        (0.0, 0.0),
        (12.9716, 77.5946),
        (-33.8688, 151.2093),
        (90.0, 0.0),
    ])
    def test_identical_points_are_zero(self, lat, lon):
        """Distance from a point to itself is exactly zero."""
        assert distance_km(lat, lon, lat, lon) == 0.0

    def test_symmetric(self):
        """Swapping endpoints gives the same distance."""
        a = (51.5074, -0.1278)
        b = (48.8566, 2.3522)
        assert distance_km(*a, *b) == pytest.approx(distance_km(*b, *a), abs=1e-6)

    def test_london_to_paris(self):
        """Known city pair lands near the published great-circle distance."""
        assert distance_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)

    def test_one_degree_of_latitude(self):
        """One degree along a meridian is R * pi / 180."""
        expected = EARTH_RADIUS_KM * math.pi / 180
        assert distance_km(10.0, 20.0, 11.0, 20.0) == pytest.approx(expected, abs=1e-6)

    def test_antipodal_points(self):
        """Antipodes are half the circumference apart."""
        expected = math.pi * EARTH_RADIUS_KM
        assert distance_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(expected, rel=1e-9)
        assert distance_km(45.0, 30.0, -45.0, -150.0) == pytest.approx(expected, rel=1e-6)

    def test_short_distance(self):
        """About 100 m of latitude."""
        d = distance_km(12.9716, 77.5946, 12.9725, 77.5946)
        assert 0.09 < d < 0.11


class TestLevenshtein:
    """Test edit distance."""

    @pytest.mark.parametrize("a, b, expected", [
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("", "abc", 3),
        ("abc", "", 3),
        ("same", "same", 0),
        ("main st", "main street", 4),
    ])
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_distance_is_symmetric(self):
        assert levenshtein_distance("garbage", "garage bin") == levenshtein_distance("garage bin", "garbage")

    def test_similarity_uses_longer_length(self):
        """1 - 4 / 28 for the Main St / Main Street titles."""
        sim = levenshtein_similarity("large pothole on main st", "large pothole on main street")
        assert sim == pytest.approx(1 - 4 / 28)

    def test_similarity_of_empty_strings(self):
        assert levenshtein_similarity("", "") == 0.0

    @pytest.mark.parametrize("a, b", [
        ("overflowing bin", "overflowing garbage bin"),
        ("streetlight out", "street light not working"),
        ("water leak", ""),
        ("ab", "ba"),
        ("café au lait", "cafe au lait"),
    ])
    def test_similarity_matches_longer_length_formula(self, a, b):
        expected = 1 - levenshtein_distance(a, b) / max(len(a), len(b))
        assert levenshtein_similarity(a, b) == pytest.approx(expected, abs=1e-12)

    def test_long_inputs_within_validation_limit(self):
        """Two 5000-character descriptions one edit apart."""
        a = "x" * 5000
        b = "x" * 4999 + "y"
        assert levenshtein_distance(a, b) == 1
        assert levenshtein_similarity(a, b) == pytest.approx(1 - 1 / 5000)


class TestWordOverlap:
    """Test word-overlap ratio."""

    def test_divides_by_larger_set(self):
        """3 shared words out of a 5-word set."""
        ratio = word_overlap_ratio("broken street light", "street light broken near park")
        assert ratio == pytest.approx(0.6)

    def test_duplicate_words_collapse(self):
        """Repeated words count once."""
        assert word_overlap_ratio("water water leak", "water leak") == 1.0

    def test_no_shared_words(self):
        assert word_overlap_ratio("streetlight out", "garbage not collected") == 0.0

    def test_splits_on_whitespace_runs(self):
        assert word_overlap_ratio("open\tmanhole   cover", "open manhole cover") == 1.0


class TestTextSimilarity:
    """Test combined text similarity."""

    def test_same_text_is_one(self):
        assert text_similarity("Overflowing bin", "Overflowing bin") == 1.0

    def test_case_and_outer_whitespace_ignored(self):
        assert text_similarity("  Overflowing BIN ", "overflowing bin") == 1.0

    def test_empty_strings_are_zero(self):
        """Empty text never matches, not even other empty text."""
        assert text_similarity("", "") == 0.0
        assert text_similarity("   ", "   ") == 0.0
        assert text_similarity("", "pothole") == 0.0
        assert text_similarity("pothole", "  ") == 0.0

    def test_none_treated_as_empty(self):
        assert text_similarity(None, "pothole") == 0.0

    def test_reordered_words_score_high(self):
        """Word overlap rescues rewordings that edit distance punishes."""
        a = "water pipe burst near school"
        b = "school near burst pipe water"
        assert levenshtein_similarity(a, b) < 0.7
        assert text_similarity(a, b) == 1.0

    def test_takes_more_generous_measure(self):
        a = "Large pothole on Main St"
        b = "Large pothole on Main Street"
        assert word_overlap_ratio(a.lower(), b.lower()) == pytest.approx(0.8)
        assert text_similarity(a, b) == pytest.approx(1 - 4 / 28)

    @pytest.mark.parametrize("a, b", [
        ("Streetlight out", "Garbage not collected"),
        ("Large pothole on Main St", "Large pothole on Main Street"),
        ("a", "zzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzz"),
        ("Water leak", "water leakage from main pipe"),
        ("x y z", "x"),
    ])
    def test_symmetric_and_bounded(self, a, b):
        """Order never matters and the result stays in [0, 1]."""
        forward = text_similarity(a, b)
        assert forward == text_similarity(b, a)
        assert 0.0 <= forward <= 1.0

    def test_maximally_different_strings(self):
        """No shared characters at all still stays within bounds."""
        sim = text_similarity("aaaa", "zzzzzzzz")
        assert sim == 0.0
