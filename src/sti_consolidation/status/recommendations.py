"""When the next routine screening is due."""

from collections.abc import Sequence
from datetime import date, timedelta

from ..config import DEFAULT_CONFIG, RecommendationConfig
from ..normalizers.test_names import normalize_test_name
from ..schemas.common import RiskLevel
from ..schemas.history import TestingRecommendation, TestRecord

ROUTINE_TESTS = ("hiv", "syphilis", "chlamydia", "gonorrhea")
ROUTINE_PANEL_KEYWORDS = ("basic", "full", "std", "sti", "routine", "panel", "4-test")


def has_routine_tests(record: TestRecord) -> bool:
    """Whether a record counts as routine screening.

    Either a routine test appears under its canonical name or the declared panel type reads
    like a screening panel.
    """
    if any(routine in normalize_test_name(test.name).lower() for test in record.tests for routine in ROUTINE_TESTS):
        return True
    test_type = (record.test_type or "").lower()
    return any(keyword in test_type for keyword in ROUTINE_PANEL_KEYWORDS)


def _last_routine_date(history: Sequence[TestRecord]) -> date | None:
    return max((record.test_date for record in history if has_routine_tests(record)), default=None)


def most_recent_routine_test_date(
    existing: Sequence[TestRecord],
    candidate_date: date,
    candidate_has_routine: bool,
) -> date:
    """Latest routine date once a new upload is saved.

    Falls back to the candidate date when nothing routine exists yet.
    """
    dates = [record.test_date for record in existing if has_routine_tests(record)]
    if candidate_has_routine:
        dates.append(candidate_date)
    return max(dates, default=candidate_date)


def compute_testing_recommendation(
    history: Sequence[TestRecord],
    risk_level: RiskLevel | None,
    today: date,
    config: RecommendationConfig = DEFAULT_CONFIG.recommendations,
) -> TestingRecommendation:
    """Next due date from the last routine screening and the risk interval.

    The last test date and the interval are filled independently, so either
    can be present without the other. Day counts are calendar days.
    """
    last_test = _last_routine_date(history)
    interval = config.intervals[risk_level] if risk_level else None

    if last_test is None or interval is None:
        return TestingRecommendation(
            last_test_date=last_test,
            risk_level=risk_level,
            interval_days=interval,
        )

    next_due = last_test + timedelta(days=interval)
    days_until_due = (next_due - today).days
    return TestingRecommendation(
        last_test_date=last_test,
        next_due_date=next_due,
        days_until_due=days_until_due,
        is_overdue=days_until_due < 0,
        is_due_soon=0 <= days_until_due <= config.due_soon_days,
        risk_level=risk_level,
        interval_days=interval,
    )


def compute_expected_next_date(
    history: Sequence[TestRecord],
    risk_level: RiskLevel | None,
    today: date,
    config: RecommendationConfig = DEFAULT_CONFIG.recommendations,
) -> date | None:
    """Reminder date: one interval after the last routine test.

    With no routine history the user is nudged a week out instead.
    """
    if not risk_level:
        return None
    last_test = _last_routine_date(history)
    if last_test is None:
        return today + timedelta(days=config.first_test_nudge_days)
    return last_test + timedelta(days=config.intervals[risk_level])


def _plural(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def format_due_message(recommendation: TestingRecommendation) -> str | None:
    if not recommendation.risk_level or recommendation.days_until_due is None:
        return None
    if recommendation.is_overdue:
        return f"You're {_plural(abs(recommendation.days_until_due))} overdue for testing"
    if recommendation.is_due_soon:
        if recommendation.days_until_due == 0:
            return "Your next test is due today"
        return f"Your next test is due in {_plural(recommendation.days_until_due)}"
    return None
