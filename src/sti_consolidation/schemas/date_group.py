"""Date group schema produced by batch consolidation."""

import datetime

from pydantic import BaseModel

from .common import (
    RawTestObservation,
    TestStatus,
    VerificationDetails,
    VerificationResult,
)


class TestConflict(BaseModel):
    """Disagreement between documents of one date group about a test."""

    test_name: str
    conflicting_statuses: list[TestStatus]
    occurrences: list[RawTestObservation] = []
    resolved_status: TestStatus


class DeduplicationStats(BaseModel):
    """Counters reported by test deduplication."""

    total_input: int = 0
    unique_tests: int = 0
    duplicates_removed: int = 0
    conflicts_detected: int = 0


class DateGroup(BaseModel):
    """Merged results for all documents sharing one collection date."""

    date: datetime.date | None = None
    tests: list[RawTestObservation] = []
    conflicts: list[TestConflict] = []
    overall_status: TestStatus = TestStatus.PENDING
    test_type: str = "STI Panel"
    notes: str = ""
    is_verified: bool = False
    verification_result: VerificationResult | None = None
    verification_details: list[VerificationDetails] = []
    source_doc_indices: list[int] = []
