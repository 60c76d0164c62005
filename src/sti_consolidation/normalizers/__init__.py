"""Normalizers for test names, laboratory names and result text."""

from .lab_names import (
    RECOGNIZED_LAB_NAMES,
    matches_canadian_lab,
    matches_recognized_lab,
    normalize_lab_name,
)
from .lab_registry import (
    LAB_REGISTRY,
    RecognizedLab,
    find_lab_by_name,
    get_health_card_type,
    get_lab_by_id,
    get_labs_by_region,
)
from .matching import AliasTable
from .results import standardize_result
from .test_names import (
    CONDITION_ALIASES,
    UNKNOWN_TEST,
    is_chronic_status_test,
    normalize_test_name,
)

__all__ = [
    "AliasTable",
    # Test names
    "normalize_test_name",
    "is_chronic_status_test",
    "CONDITION_ALIASES",
    "UNKNOWN_TEST",
    # Lab names
    "normalize_lab_name",
    "matches_recognized_lab",
    "matches_canadian_lab",
    "RECOGNIZED_LAB_NAMES",
    "RecognizedLab",
    "LAB_REGISTRY",
    "find_lab_by_name",
    "get_lab_by_id",
    "get_labs_by_region",
    "get_health_card_type",
    # Results
    "standardize_result",
]
