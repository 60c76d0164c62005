"""Multi-document consolidation for a single upload batch."""

from .classification import DEFAULT_TEST_TYPE, FULL_PANEL, determine_test_type, families_covered
from .deduplication import deduplicate_tests, deduplication_key
from .documents import build_parsed_document
from .grouping import compute_group_status, consolidate_documents

__all__ = [
    "DEFAULT_TEST_TYPE",
    "FULL_PANEL",
    "families_covered",
    "determine_test_type",
    "deduplication_key",
    "deduplicate_tests",
    "build_parsed_document",
    "compute_group_status",
    "consolidate_documents",
]
