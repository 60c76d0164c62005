"""Lab result consolidation schemas for parsed documents and test history."""

from .batch_output import ConsolidatedBatch, ContentFingerprint, DuplicateMatch
from .common import (
    STATUS_SEVERITY,
    RawTestObservation,
    RiskLevel,
    TestStatus,
    VerificationCheck,
    VerificationDetails,
    VerificationLevel,
    VerificationResult,
)
from .date_group import DateGroup, DeduplicationStats, TestConflict
from .history import (
    AggregatedSTI,
    KnownCondition,
    STIStatusSummary,
    TestingRecommendation,
    TestRecord,
)
from .lab_report import ExtractedTest, LabExtraction, PatientProfile
from .parsed_document import ParsedDocument

__all__ = [
    # Common
    "TestStatus",
    "STATUS_SEVERITY",
    "VerificationLevel",
    "RiskLevel",
    "RawTestObservation",
    "VerificationCheck",
    "VerificationResult",
    "VerificationDetails",
    # Extractor input
    "ExtractedTest",
    "LabExtraction",
    "PatientProfile",
    # Parsed documents
    "ParsedDocument",
    # Consolidation
    "TestConflict",
    "DeduplicationStats",
    "DateGroup",
    # History
    "TestRecord",
    "KnownCondition",
    "AggregatedSTI",
    "STIStatusSummary",
    "TestingRecommendation",
    # Output
    "ContentFingerprint",
    "DuplicateMatch",
    "ConsolidatedBatch",
]
