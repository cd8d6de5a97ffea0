"""
Tunable policy for duplicate-report detection.

Defaults live here as module constants; DuplicateConfig.from_env() lets a
deployment override any of them through CIVICREPORT_* environment variables
without touching the scoring code.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

# Minimum fused score for a candidate to be listed as similar
INCLUSION_THRESHOLD = 0.5

# Minimum top fused score to flag the report as a likely duplicate
DUPLICATE_THRESHOLD = 0.7

# Proximity bonus radius; all-or-nothing, no decay inside or outside it
PROXIMITY_KM = 0.5

LOCATION_WEIGHT = 0.4
TITLE_WEIGHT = 0.4
DESCRIPTION_WEIGHT = 0.2

MAX_MATCHES = 3

# Candidate window: bounds the linear scan, not a correctness requirement
WINDOW_DAYS = 30
CANDIDATE_LIMIT = 100

# Upstream validation caps description length here; edit distance is O(n*m)
MAX_TEXT_LENGTH = 5000

ENV_PREFIX = "CIVICREPORT_"


@dataclass(frozen=True)
class DuplicateConfig:
    """Thresholds, weights and candidate window for a DuplicateScorer."""

    inclusion_threshold: float = INCLUSION_THRESHOLD
    duplicate_threshold: float = DUPLICATE_THRESHOLD
    proximity_km: float = PROXIMITY_KM
    location_weight: float = LOCATION_WEIGHT
    title_weight: float = TITLE_WEIGHT
    description_weight: float = DESCRIPTION_WEIGHT
    max_matches: int = MAX_MATCHES
    window_days: int = WINDOW_DAYS
    candidate_limit: int = CANDIDATE_LIMIT
    max_text_length: int = MAX_TEXT_LENGTH

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise ValueError("Invalid duplicate detection config: " + "; ".join(errors))

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not 0.0 <= self.inclusion_threshold <= self.duplicate_threshold <= 1.0:
            errors.append(
                "thresholds must satisfy 0 <= inclusion_threshold <= duplicate_threshold <= 1 "
                f"(got {self.inclusion_threshold}, {self.duplicate_threshold})"
            )
        if self.proximity_km < 0:
            errors.append("proximity_km must be >= 0")
        for name in ("location_weight", "title_weight", "description_weight"):
            if getattr(self, name) < 0:
                errors.append(f"{name} must be >= 0")
        for name in ("max_matches", "window_days", "candidate_limit", "max_text_length"):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be > 0")
        return errors

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DuplicateConfig":
        """
        Build a config from CIVICREPORT_<FIELD_NAME> environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            DuplicateConfig with overrides applied

        Raises:
            ValueError: If a variable is not a number or the result is inconsistent
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == "":
                continue
            cast = int if f.type in (int, "int") else float
            try:
                overrides[f.name] = cast(raw.strip())
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{f.name.upper()} must be a number, got {raw!r}")
        return cls(**overrides)


DEFAULT_CONFIG = DuplicateConfig()
