"""Shared types for lab result consolidation schemas."""

from enum import Enum

from pydantic import BaseModel


class TestStatus(str, Enum):
    """Outcome of a single test as reported on a lab document."""

    NEGATIVE = "negative"
    POSITIVE = "positive"
    PENDING = "pending"
    INCONCLUSIVE = "inconclusive"


# Clinical severity, highest first. Pending and inconclusive share a rank.
STATUS_SEVERITY: dict[TestStatus, int] = {
    TestStatus.POSITIVE: 2,
    TestStatus.PENDING: 1,
    TestStatus.INCONCLUSIVE: 1,
    TestStatus.NEGATIVE: 0,
}


class VerificationLevel(str, Enum):
    """Trust level derived from a verification score."""

    NO_SIGNALS = "no_signals"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class RiskLevel(str, Enum):
    """Self-assessed risk level driving the testing interval."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class RawTestObservation(BaseModel):
    """A single test outcome extracted from one document."""

    name: str
    result_text: str = ""
    status: TestStatus = TestStatus.PENDING


class VerificationCheck(BaseModel):
    """One weighted authenticity signal."""

    name: str
    passed: bool
    points: int
    max_points: int
    details: str | None = None


class VerificationResult(BaseModel):
    """Authenticity score for one document or a merged date group."""

    score: int = 0
    level: VerificationLevel = VerificationLevel.NO_SIGNALS
    checks: list[VerificationCheck] = []
    is_verified: bool = False
    has_future_date: bool = False
    is_suspiciously_fast: bool = False
    is_older_than_2_years: bool = False


class VerificationDetails(BaseModel):
    """Identity snippets captured from a document for display."""

    lab_name: str | None = None
    patient_name: str | None = None
    has_health_card: bool = False
    has_accession_number: bool = False
    name_matched: bool = False
