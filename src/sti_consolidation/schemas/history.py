"""Schemas for persisted test history and the derived status view."""

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from .common import RawTestObservation, RiskLevel, TestStatus, VerificationLevel


class TestRecord(BaseModel):
    """A stored test-result row, one per consolidated date group."""

    test_date: date
    tests: list[RawTestObservation] = []
    test_type: str | None = None
    is_verified: bool = False
    verification_level: VerificationLevel | None = None

    @field_validator("tests", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v


class KnownCondition(BaseModel):
    """A user-declared chronic or managed condition."""

    condition: str
    added_at: date
    notes: str | None = None
    management_methods: list[str] = []

    @field_validator("added_at", mode="before")
    @classmethod
    def _date_only(cls, v):
        # Profiles store a full timestamp; only the calendar day matters.
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v


class AggregatedSTI(BaseModel):
    """Current status for one condition across the whole history."""

    name: str
    status: TestStatus
    result: str
    test_date: date
    is_verified: bool = False
    verification_level: VerificationLevel | None = None
    is_known_condition: bool = False
    is_status_sti: bool = False
    has_test_data: bool = True
    management_methods: list[str] | None = None


class STIStatusSummary(BaseModel):
    """Dashboard view computed from history and known conditions."""

    aggregated: list[AggregatedSTI] = []
    routine: list[AggregatedSTI] = []
    known_conditions: list[AggregatedSTI] = []
    new_status_positives: list[AggregatedSTI] = []
    overall_status: TestStatus = TestStatus.PENDING
    last_tested_date: date | None = None


class TestingRecommendation(BaseModel):
    """When the next routine screening is due."""

    last_test_date: date | None = None
    next_due_date: date | None = None
    days_until_due: int | None = None
    is_overdue: bool = False
    is_due_soon: bool = False
    risk_level: RiskLevel | None = None
    interval_days: int | None = None
