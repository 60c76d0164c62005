"""Collapse repeated tests within one date group.

Overlapping screenshots of the same report repeat tests. Repeats with the
same status collapse to the most detailed entry; repeats that disagree are
recorded as conflicts and resolved to the most clinically severe status.
"""

import logging
import re
from collections.abc import Iterable

from ..normalizers.test_names import UNKNOWN_TEST, normalize_test_name
from ..schemas.common import STATUS_SEVERITY, RawTestObservation
from ..schemas.date_group import DeduplicationStats, TestConflict

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-_/]")


def deduplication_key(test_name: str) -> str:
    """Comparison key that ignores case, separators and spacing."""
    return " ".join(_SEPARATORS.sub(" ", test_name.lower()).split())


def _select_best(occurrences: list[RawTestObservation]) -> RawTestObservation:
    best = occurrences[0]
    for current in occurrences[1:]:
        if (STATUS_SEVERITY[current.status], len(current.result_text)) > (
            STATUS_SEVERITY[best.status],
            len(best.result_text),
        ):
            best = current
    return best


def deduplicate_tests(
    tests: Iterable[RawTestObservation],
) -> tuple[list[RawTestObservation], list[TestConflict], DeduplicationStats]:
    """Merge tests sharing a canonical name.

    Returns the unique tests in first-seen order, one conflict per test name
    whose occurrences disagree, and counters for logging.
    """
    grouped: dict[str, list[RawTestObservation]] = {}
    total = 0
    for position, test in enumerate(tests):
        total += 1
        canonical = normalize_test_name(test.name)
        key = deduplication_key(canonical)
        if canonical == UNKNOWN_TEST:
            # Unnamed rows are never merged with each other.
            key = f"{key}#{position}"
        grouped.setdefault(key, []).append(test.model_copy(update={"name": canonical}))

    unique: list[RawTestObservation] = []
    conflicts: list[TestConflict] = []
    for occurrences in grouped.values():
        best = _select_best(occurrences)
        unique.append(best)

        statuses = list(dict.fromkeys(o.status for o in occurrences))
        if len(statuses) > 1:
            conflicts.append(
                TestConflict(
                    test_name=best.name,
                    conflicting_statuses=statuses,
                    occurrences=occurrences,
                    resolved_status=best.status,
                )
            )
            logger.warning(
                "Conflicting results for %s: %s, resolved to %s",
                best.name,
                ", ".join(s.value for s in statuses),
                best.status.value,
            )
        elif len(occurrences) > 1:
            logger.debug("Collapsed %d repeats of %s", len(occurrences), best.name)

    stats = DeduplicationStats(
        total_input=total,
        unique_tests=len(unique),
        duplicates_removed=total - len(unique),
        conflicts_detected=len(conflicts),
    )
    return unique, conflicts, stats
