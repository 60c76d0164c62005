"""Validators for collection dates, document authenticity and duplicate uploads."""

from .collection_date import DateValidation, parse_collection_date, validate_collection_date
from .duplicate_detection import (
    ZERO_SIMHASH,
    classify_duplicate,
    compute_simhash,
    generate_content_hash,
    hamming_distance,
    normalize_text_for_hashing,
)
from .verification import (
    match_names,
    merge_verification_results,
    score_document,
    score_to_level,
)

__all__ = [
    "DateValidation",
    "parse_collection_date",
    "validate_collection_date",
    "ZERO_SIMHASH",
    "normalize_text_for_hashing",
    "compute_simhash",
    "hamming_distance",
    "generate_content_hash",
    "classify_duplicate",
    "match_names",
    "score_document",
    "score_to_level",
    "merge_verification_results",
]
