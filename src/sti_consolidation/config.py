"""Configuration models for scoring, reminders and duplicate detection.

Defaults mirror ``configs/config.json``. The JSON file only needs the keys it
overrides.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, field_validator

from .schemas.common import RiskLevel, VerificationLevel

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("configs/config.json")


class LevelThreshold(BaseModel):
    """Minimum score for a verification level."""

    level: VerificationLevel
    min_score: int


class VerificationConfig(BaseModel):
    """Weights and thresholds for document authenticity scoring."""

    weights: dict[str, int] = {
        "recognized_lab": 25,
        "health_card": 20,
        "accession_number": 15,
        "name_match": 15,
        "collection_date": 10,
        "structural_completeness": 10,
        "multi_signal_agreement": 5,
    }
    # The first threshold the score reaches wins, so levels are kept highest first.
    levels: list[LevelThreshold] = [
        LevelThreshold(level=VerificationLevel.HIGH, min_score=75),
        LevelThreshold(level=VerificationLevel.MODERATE, min_score=50),
        LevelThreshold(level=VerificationLevel.LOW, min_score=1),
    ]
    verified_threshold: int = 60
    partial_accession_points: int = 8
    multi_signal_minimum: int = 3
    max_age_days: int = 730
    suspicious_gap_hours: float = 2

    @field_validator("levels")
    @classmethod
    def _highest_first(cls, v: list[LevelThreshold]) -> list[LevelThreshold]:
        return sorted(v, key=lambda threshold: threshold.min_score, reverse=True)


class RecommendationConfig(BaseModel):
    """Testing interval settings."""

    intervals: dict[RiskLevel, int] = {
        RiskLevel.LOW: 365,
        RiskLevel.MODERATE: 180,
        RiskLevel.HIGH: 90,
    }
    due_soon_days: int = 14
    first_test_nudge_days: int = 7


class DuplicateConfig(BaseModel):
    """Near-duplicate upload detection settings."""

    near_duplicate_distance: int = 10


class ConsolidationConfig(BaseModel):
    """Top-level configuration."""

    verification: VerificationConfig = VerificationConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    duplicates: DuplicateConfig = DuplicateConfig()


DEFAULT_CONFIG = ConsolidationConfig()


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ConsolidationConfig:
    """Load configuration from a JSON file, falling back to defaults."""
    config_path = Path(path)
    if not config_path.exists():
        logger.info("No config file at %s, using defaults", config_path)
        return ConsolidationConfig()
    return ConsolidationConfig.model_validate_json(config_path.read_text())
