"""Cross-time status aggregation and testing reminders."""

from .aggregation import (
    NOT_RECENTLY_TESTED,
    aggregate_sti_status,
    compute_overall_status,
    compute_sti_status,
    find_matching_known_condition,
    last_tested_date,
)
from .recommendations import (
    ROUTINE_PANEL_KEYWORDS,
    ROUTINE_TESTS,
    compute_expected_next_date,
    compute_testing_recommendation,
    format_due_message,
    has_routine_tests,
    most_recent_routine_test_date,
)

__all__ = [
    "NOT_RECENTLY_TESTED",
    "find_matching_known_condition",
    "aggregate_sti_status",
    "compute_overall_status",
    "last_tested_date",
    "compute_sti_status",
    "ROUTINE_TESTS",
    "ROUTINE_PANEL_KEYWORDS",
    "has_routine_tests",
    "most_recent_routine_test_date",
    "compute_testing_recommendation",
    "compute_expected_next_date",
    "format_due_message",
]
