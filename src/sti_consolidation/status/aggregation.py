"""Current status per condition across a user's whole test history.

The aggregated list is a view: it is recomputed from the full history on
every call and never stored.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from ..consolidation.deduplication import deduplication_key
from ..normalizers.test_names import CONDITION_ALIASES, is_chronic_status_test, normalize_test_name
from ..schemas.common import TestStatus
from ..schemas.history import AggregatedSTI, KnownCondition, STIStatusSummary, TestRecord

logger = logging.getLogger(__name__)

NOT_RECENTLY_TESTED = "Not recently tested"


def find_matching_known_condition(
    test_name: str, known_conditions: Sequence[KnownCondition]
) -> KnownCondition | None:
    """First known condition naming the same condition as ``test_name``."""
    for condition in known_conditions:
        if CONDITION_ALIASES.same_family(condition.condition, test_name):
            return condition
    return None


def aggregate_sti_status(
    history: Iterable[TestRecord],
    known_conditions: Sequence[KnownCondition] = (),
) -> list[AggregatedSTI]:
    """Latest result per test, plus placeholders for untested known conditions.

    When two records share a test date, the one later in ``history`` wins.
    """
    latest: dict[str, AggregatedSTI] = {}
    for record in history:
        for test in record.tests:
            if not test.name:
                continue
            name = normalize_test_name(test.name)
            key = deduplication_key(name)
            existing = latest.get(key)
            if existing is not None and record.test_date < existing.test_date:
                continue

            matched = find_matching_known_condition(name, known_conditions)
            latest[key] = AggregatedSTI(
                name=name,
                status=test.status,
                result=test.result_text or test.status.value.capitalize(),
                test_date=record.test_date,
                is_verified=record.is_verified,
                verification_level=record.verification_level,
                is_known_condition=matched is not None,
                is_status_sti=is_chronic_status_test(name),
                management_methods=matched.management_methods if matched else None,
            )
            logger.debug("Latest %s result from %s", name, record.test_date.isoformat())

    aggregated = list(latest.values())
    for condition in known_conditions:
        if any(CONDITION_ALIASES.same_family(condition.condition, entry.name) for entry in latest.values()):
            continue
        aggregated.append(
            AggregatedSTI(
                name=condition.condition,
                status=TestStatus.PENDING,
                result=NOT_RECENTLY_TESTED,
                test_date=condition.added_at,
                is_verified=False,
                is_known_condition=True,
                is_status_sti=is_chronic_status_test(condition.condition),
                has_test_data=False,
                management_methods=condition.management_methods,
            )
        )

    return sorted(aggregated, key=lambda entry: entry.name.casefold())


def compute_overall_status(aggregated: Iterable[AggregatedSTI]) -> TestStatus:
    """Summary status ignoring known conditions.

    Managed conditions never block an otherwise clean summary. Nothing left
    to judge means pending.
    """
    statuses = {entry.status for entry in aggregated if not entry.is_known_condition}
    if not statuses:
        return TestStatus.PENDING
    if TestStatus.POSITIVE in statuses:
        return TestStatus.POSITIVE
    if TestStatus.PENDING in statuses or TestStatus.INCONCLUSIVE in statuses:
        return TestStatus.PENDING
    return TestStatus.NEGATIVE


def last_tested_date(aggregated: Iterable[AggregatedSTI]) -> date | None:
    """Most recent date with real test data."""
    dates = [entry.test_date for entry in aggregated if entry.has_test_data]
    return max(dates, default=None)


def compute_sti_status(
    history: Iterable[TestRecord],
    known_conditions: Sequence[KnownCondition] = (),
) -> STIStatusSummary:
    """Dashboard summary built from the aggregated view."""
    aggregated = aggregate_sti_status(history, known_conditions)
    routine = [entry for entry in aggregated if not entry.is_known_condition]
    known = [entry for entry in aggregated if entry.is_known_condition]
    new_positives = [
        entry
        for entry in routine
        if entry.is_status_sti and entry.status == TestStatus.POSITIVE
    ]
    if new_positives:
        logger.warning(
            "Positive result for untracked chronic condition: %s",
            ", ".join(entry.name for entry in new_positives),
        )

    return STIStatusSummary(
        aggregated=aggregated,
        routine=routine,
        known_conditions=known,
        new_status_positives=new_positives,
        overall_status=compute_overall_status(aggregated),
        last_tested_date=last_tested_date(aggregated),
    )
