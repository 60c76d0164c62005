"""Unit tests for cross-time status aggregation and testing reminders."""

from datetime import date, timedelta

import pytest

from sti_consolidation.schemas import (
    KnownCondition,
    RawTestObservation,
    RiskLevel,
    TestingRecommendation,
    TestRecord,
    TestStatus,
)
from sti_consolidation.status import (
    NOT_RECENTLY_TESTED,
    aggregate_sti_status,
    compute_expected_next_date,
    compute_overall_status,
    compute_sti_status,
    compute_testing_recommendation,
    find_matching_known_condition,
    format_due_message,
    has_routine_tests,
    last_tested_date,
    most_recent_routine_test_date,
)

NEG = TestStatus.NEGATIVE
POS = TestStatus.POSITIVE
PEND = TestStatus.PENDING
INC = TestStatus.INCONCLUSIVE

TODAY = date(2026, 3, 1)


def _record(test_date: date, *tests: tuple[str, TestStatus], test_type: str | None = None) -> TestRecord:
    """Helper to create a stored history row."""
    return TestRecord(
        test_date=test_date,
        tests=[RawTestObservation(name=name, status=status) for name, status in tests],
        test_type=test_type,
    )


def _by_name(aggregated) -> dict:
    return {entry.name: entry for entry in aggregated}


# ============================================================================
# AGGREGATION TESTS
# ============================================================================


class TestAggregateStiStatus:
    """Tests for the latest-result-per-test view."""

    def test_latest_date_wins_in_any_order(self):
        older = _record(date(2025, 1, 10), ("HIV", POS))
        newer = _record(date(2025, 6, 1), ("HIV", NEG))
        for history in ([older, newer], [newer, older]):
            aggregated = aggregate_sti_status(history)
            assert len(aggregated) == 1
            assert aggregated[0].status == NEG
            assert aggregated[0].test_date == date(2025, 6, 1)

    def test_same_date_later_record_wins(self):
        first = _record(date(2025, 6, 1), ("Syphilis", POS))
        second = _record(date(2025, 6, 1), ("Syphilis", NEG))
        assert aggregate_sti_status([first, second])[0].status == NEG
        assert aggregate_sti_status([second, first])[0].status == POS

    def test_name_variants_share_an_entry(self):
        history = [
            _record(date(2025, 1, 10), ("HIV 1/2 Antibody", NEG)),
            _record(date(2025, 6, 1), ("hiv-1/2", NEG)),
        ]
        aggregated = aggregate_sti_status(history)
        assert [entry.name for entry in aggregated] == ["HIV-1/2"]

    def test_result_text_falls_back_to_status(self):
        history = [
            TestRecord(
                test_date=date(2025, 6, 1),
                tests=[
                    RawTestObservation(name="HIV", status=NEG, result_text="Non-Reactive"),
                    RawTestObservation(name="Syphilis", status=PEND),
                ],
            )
        ]
        entries = _by_name(aggregate_sti_status(history))
        assert entries["HIV"].result == "Non-Reactive"
        assert entries["Syphilis"].result == "Pending"

    def test_known_condition_matched(self):
        known = [
            KnownCondition(
                condition="HSV-2",
                added_at="2025-03-04T10:00:00Z",
                management_methods=["Daily suppressive therapy"],
            )
        ]
        history = [_record(date(2025, 6, 1), ("Herpes Simplex Virus 2", POS))]
        entry = aggregate_sti_status(history, known)[0]
        assert entry.name == "HSV-2"
        assert entry.is_known_condition
        assert entry.is_status_sti
        assert entry.has_test_data
        assert entry.management_methods == ["Daily suppressive therapy"]

    def test_untested_known_condition_placeholder(self):
        known = [KnownCondition(condition="Hepatitis B", added_at="2025-03-04T10:00:00Z")]
        history = [_record(date(2025, 6, 1), ("HIV", NEG))]
        entries = _by_name(aggregate_sti_status(history, known))
        placeholder = entries["Hepatitis B"]
        assert placeholder.status == PEND
        assert placeholder.result == NOT_RECENTLY_TESTED
        assert placeholder.test_date == date(2025, 3, 4)
        assert placeholder.is_known_condition
        assert not placeholder.has_test_data
        assert not placeholder.is_verified

    def test_each_untested_condition_gets_placeholder(self):
        known = [
            KnownCondition(condition="HIV", added_at=date(2025, 1, 1)),
            KnownCondition(condition="HIV-1", added_at=date(2025, 2, 1)),
        ]
        entries = aggregate_sti_status([], known)
        assert [entry.name for entry in entries] == ["HIV", "HIV-1"]
        assert all(not entry.has_test_data for entry in entries)
        assert [entry.test_date for entry in entries] == [date(2025, 1, 1), date(2025, 2, 1)]

    def test_sorted_case_insensitively(self):
        known = [KnownCondition(condition="herpes", added_at=date(2025, 1, 1))]
        history = [_record(date(2025, 6, 1), ("HIV", NEG), ("Chlamydia", NEG), ("hpv dna", NEG))]
        names = [entry.name for entry in aggregate_sti_status(history, known)]
        assert names == ["Chlamydia", "herpes", "HIV", "HPV Dna"]

    def test_unnamed_tests_skipped(self):
        history = [_record(date(2025, 6, 1), ("", POS), ("HIV", NEG))]
        assert [entry.name for entry in aggregate_sti_status(history)] == ["HIV"]

    def test_empty_history(self):
        assert aggregate_sti_status([]) == []


class TestFindMatchingKnownCondition:
    """Tests for matching test names against declared conditions."""

    def test_alias_match(self):
        known = [
            KnownCondition(condition="Herpes Simplex Virus 1", added_at=date(2025, 1, 1)),
            KnownCondition(condition="Hep B", added_at=date(2025, 1, 1)),
        ]
        assert find_matching_known_condition("HSV-1", known) is known[0]
        assert find_matching_known_condition("Hepatitis B", known) is known[1]
        assert find_matching_known_condition("HSV-2", known) is None


class TestOverallStatus:
    """Tests for the dashboard summary status."""

    def test_known_conditions_excluded(self):
        known = [KnownCondition(condition="HIV", added_at=date(2025, 1, 1))]
        history = [_record(date(2025, 6, 1), ("HIV", POS), ("Syphilis", NEG))]
        assert compute_overall_status(aggregate_sti_status(history, known)) == NEG

    def test_only_known_conditions_is_pending(self):
        known = [KnownCondition(condition="HIV", added_at=date(2025, 1, 1))]
        history = [_record(date(2025, 6, 1), ("HIV", POS))]
        assert compute_overall_status(aggregate_sti_status(history, known)) == PEND
        assert compute_overall_status([]) == PEND

    @pytest.mark.parametrize(
        "statuses, expected",
        [
            ([NEG, POS], POS),
            ([NEG, INC], PEND),
            ([NEG, PEND], PEND),
            ([NEG, NEG], NEG),
        ],
    )
    def test_ordering(self, statuses, expected):
        history = [_record(date(2025, 6, 1), ("HIV", statuses[0]), ("Syphilis", statuses[1]))]
        assert compute_overall_status(aggregate_sti_status(history)) == expected


class TestComputeStiStatus:
    """Tests for the full dashboard summary."""

    def test_summary(self):
        known = [
            KnownCondition(condition="HSV-2", added_at=date(2025, 1, 1)),
            KnownCondition(condition="Hepatitis C", added_at=date(2026, 2, 1)),
        ]
        history = [
            _record(date(2025, 6, 1), ("HIV", POS), ("Syphilis", NEG), ("HSV-2", POS)),
            _record(date(2025, 9, 1), ("Chlamydia", POS)),
        ]
        summary = compute_sti_status(history, known)

        assert [entry.name for entry in summary.routine] == ["Chlamydia", "HIV", "Syphilis"]
        assert [entry.name for entry in summary.known_conditions] == ["Hepatitis C", "HSV-2"]
        # Chlamydia is curable; HSV-2 is already declared.
        assert [entry.name for entry in summary.new_status_positives] == ["HIV"]
        assert summary.overall_status == POS
        # The placeholder's declaration date is not a test date.
        assert summary.last_tested_date == date(2025, 9, 1)

    def test_no_history(self):
        summary = compute_sti_status([])
        assert summary.aggregated == []
        assert summary.overall_status == PEND
        assert summary.last_tested_date is None

    def test_last_tested_date_ignores_placeholders(self):
        known = [KnownCondition(condition="HIV", added_at=date(2026, 1, 1))]
        assert last_tested_date(aggregate_sti_status([], known)) is None


# ============================================================================
# RECOMMENDATION TESTS
# ============================================================================


def _routine(days_ago: int) -> TestRecord:
    return _record(TODAY - timedelta(days=days_ago), ("HIV", NEG), ("Syphilis", NEG))


class TestHasRoutineTests:
    """Tests for deciding whether a record counts as routine screening."""

    def test_by_test_name(self):
        assert has_routine_tests(_record(TODAY, ("Gonorrhea NAAT", NEG)))
        assert not has_routine_tests(_record(TODAY, ("HSV-2", NEG)))

    def test_by_canonical_name(self):
        record = _record(TODAY, ("RPR", NEG), ("Neisseria gonorrhoeae NAAT", NEG))
        assert has_routine_tests(record)

    def test_raw_named_record_sets_due_date(self):
        record = _record(TODAY - timedelta(days=30), ("RPR", NEG), ("Neisseria gonorrhoeae NAAT", NEG))
        rec = compute_testing_recommendation([record], RiskLevel.HIGH, TODAY)
        assert rec.last_test_date == TODAY - timedelta(days=30)
        assert rec.next_due_date == TODAY + timedelta(days=60)

    def test_by_panel_type(self):
        assert has_routine_tests(_record(TODAY, test_type="Full STI Panel"))
        assert has_routine_tests(_record(TODAY, test_type="Basic screen"))
        assert not has_routine_tests(_record(TODAY, ("HSV-2", NEG), test_type="Herpes Test"))


class TestComputeTestingRecommendation:
    """Tests for next-due-date computation."""

    def test_overdue(self):
        rec = compute_testing_recommendation([_routine(100)], RiskLevel.HIGH, TODAY)
        assert rec.last_test_date == TODAY - timedelta(days=100)
        assert rec.next_due_date == TODAY - timedelta(days=10)
        assert rec.days_until_due == -10
        assert rec.is_overdue
        assert not rec.is_due_soon
        assert rec.interval_days == 90

    def test_due_soon(self):
        rec = compute_testing_recommendation([_routine(170)], RiskLevel.MODERATE, TODAY)
        assert rec.days_until_due == 10
        assert rec.is_due_soon
        assert not rec.is_overdue

    def test_due_today_is_due_soon(self):
        rec = compute_testing_recommendation([_routine(90)], RiskLevel.HIGH, TODAY)
        assert rec.days_until_due == 0
        assert rec.is_due_soon
        assert not rec.is_overdue

    def test_not_due_yet(self):
        rec = compute_testing_recommendation([_routine(10)], RiskLevel.LOW, TODAY)
        assert rec.days_until_due == 355
        assert not rec.is_due_soon
        assert not rec.is_overdue

    def test_uses_latest_routine_record(self):
        history = [_routine(200), _routine(30), _record(TODAY - timedelta(days=5), ("HSV-2", NEG))]
        rec = compute_testing_recommendation(history, RiskLevel.HIGH, TODAY)
        assert rec.last_test_date == TODAY - timedelta(days=30)

    def test_no_risk_level(self):
        rec = compute_testing_recommendation([_routine(30)], None, TODAY)
        assert rec.last_test_date == TODAY - timedelta(days=30)
        assert rec.interval_days is None
        assert rec.next_due_date is None
        assert rec.days_until_due is None

    def test_no_routine_history(self):
        rec = compute_testing_recommendation(
            [_record(TODAY, ("HSV-2", NEG))], RiskLevel.HIGH, TODAY
        )
        assert rec.last_test_date is None
        assert rec.interval_days == 90
        assert rec.next_due_date is None
        assert not rec.is_overdue


class TestFormatDueMessage:
    """Tests for reminder copy."""

    @pytest.mark.parametrize(
        "days_ago, risk, expected",
        [
            (100, RiskLevel.HIGH, "You're 10 days overdue for testing"),
            (91, RiskLevel.HIGH, "You're 1 day overdue for testing"),
            (90, RiskLevel.HIGH, "Your next test is due today"),
            (89, RiskLevel.HIGH, "Your next test is due in 1 day"),
            (170, RiskLevel.MODERATE, "Your next test is due in 10 days"),
            (10, RiskLevel.LOW, None),
        ],
    )
    def test_messages(self, days_ago, risk, expected):
        rec = compute_testing_recommendation([_routine(days_ago)], risk, TODAY)
        assert format_due_message(rec) == expected

    def test_without_risk_level(self):
        assert format_due_message(TestingRecommendation(days_until_due=-5, is_overdue=True)) is None


class TestExpectedNextDate:
    """Tests for reminder scheduling."""

    def test_interval_after_last_routine(self):
        assert compute_expected_next_date([_routine(30)], RiskLevel.MODERATE, TODAY) == TODAY + timedelta(days=150)

    def test_first_test_nudge(self):
        assert compute_expected_next_date([], RiskLevel.LOW, TODAY) == TODAY + timedelta(days=7)

    def test_no_risk_level(self):
        assert compute_expected_next_date([_routine(30)], None, TODAY) is None


class TestMostRecentRoutineTestDate:
    """Tests for the routine date after saving a new upload."""

    def test_existing_later_than_candidate(self):
        existing = [_record(date(2025, 10, 1), ("HIV", NEG))]
        assert most_recent_routine_test_date(existing, date(2025, 9, 1), True) == date(2025, 10, 1)

    def test_candidate_later(self):
        existing = [_record(date(2025, 10, 1), ("HIV", NEG))]
        assert most_recent_routine_test_date(existing, date(2026, 1, 5), True) == date(2026, 1, 5)

    def test_candidate_not_routine(self):
        existing = [_record(date(2025, 10, 1), ("HIV", NEG))]
        assert most_recent_routine_test_date(existing, date(2026, 1, 5), False) == date(2025, 10, 1)

    def test_no_routine_anywhere_falls_back_to_candidate(self):
        existing = [_record(date(2025, 10, 1), ("HSV-2", NEG))]
        assert most_recent_routine_test_date(existing, date(2026, 1, 5), False) == date(2026, 1, 5)
