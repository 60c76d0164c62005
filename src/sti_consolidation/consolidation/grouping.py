"""Consolidate a batch of parsed documents into one record per visit date.

Documents are grouped by their literal collection date, with undated
documents forming their own group. Nothing is ever merged across dates.
"""

import logging
from collections.abc import Sequence
from datetime import date

from ..config import DEFAULT_CONFIG, VerificationConfig
from ..schemas.common import RawTestObservation, TestStatus, VerificationDetails
from ..schemas.date_group import DateGroup
from ..schemas.parsed_document import ParsedDocument
from ..validators.verification import merge_verification_results
from .classification import determine_test_type
from .deduplication import deduplicate_tests

logger = logging.getLogger(__name__)


def compute_group_status(tests: Sequence[RawTestObservation]) -> TestStatus:
    """Positive beats pending and inconclusive, which beat negative."""
    if not tests:
        return TestStatus.PENDING
    statuses = {test.status for test in tests}
    if TestStatus.POSITIVE in statuses:
        return TestStatus.POSITIVE
    if TestStatus.PENDING in statuses or TestStatus.INCONCLUSIVE in statuses:
        return TestStatus.PENDING
    return TestStatus.NEGATIVE


def _dedupe_details(documents: list[ParsedDocument]) -> list[VerificationDetails]:
    details: list[VerificationDetails] = []
    seen_labs: set[str | None] = set()
    for doc in documents:
        if doc.verification_details is None:
            continue
        lab_name = doc.verification_details.lab_name
        if lab_name in seen_labs:
            continue
        seen_labs.add(lab_name)
        details.append(doc.verification_details)
    return details


def _build_group(
    collection_date: date | None,
    indices: list[int],
    documents: list[ParsedDocument],
    config: VerificationConfig,
) -> DateGroup:
    tests, conflicts, stats = deduplicate_tests(
        test for doc in documents for test in doc.tests
    )
    logger.info(
        "Group %s: %d tests in, %d unique, %d duplicates removed, %d conflicts",
        collection_date.isoformat() if collection_date else "undated",
        stats.total_input,
        stats.unique_tests,
        stats.duplicates_removed,
        stats.conflicts_detected,
    )

    results = [doc.verification_result for doc in documents if doc.verification_result is not None]
    merged = merge_verification_results(results, config)
    if merged is not None:
        is_verified = merged.is_verified
    else:
        is_verified = any(doc.is_verified for doc in documents)

    return DateGroup(
        date=collection_date,
        tests=tests,
        conflicts=conflicts,
        overall_status=compute_group_status(tests),
        test_type=determine_test_type(tests, (doc.test_type for doc in documents)),
        notes="\n\n".join(doc.notes for doc in documents if doc.notes and doc.notes.strip()),
        is_verified=is_verified,
        verification_result=merged,
        verification_details=_dedupe_details(documents),
        source_doc_indices=indices,
    )


def consolidate_documents(
    documents: Sequence[ParsedDocument],
    config: VerificationConfig = DEFAULT_CONFIG.verification,
) -> list[DateGroup]:
    """Group documents by collection date and merge each group.

    Groups appear in order of each date's first occurrence. Every document
    index lands in exactly one group's ``source_doc_indices``, in ascending
    order.
    """
    buckets: dict[date | None, list[int]] = {}
    for index, doc in enumerate(documents):
        buckets.setdefault(doc.collection_date, []).append(index)

    groups = [
        _build_group(collection_date, indices, [documents[i] for i in indices], config)
        for collection_date, indices in buckets.items()
    ]
    logger.info("Consolidated %d documents into %d date groups", len(documents), len(groups))
    return groups
