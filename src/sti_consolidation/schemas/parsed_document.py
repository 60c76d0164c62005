"""Parsed document schema."""

from datetime import date

from pydantic import BaseModel

from .common import RawTestObservation, VerificationDetails, VerificationResult


class ParsedDocument(BaseModel):
    """One uploaded page or image after field normalization.

    Position in the batch is meaningful and is kept as provenance.
    """

    collection_date: date | None = None
    test_type: str | None = None
    tests: list[RawTestObservation] = []
    notes: str | None = None
    is_verified: bool = False
    verification_result: VerificationResult | None = None
    verification_details: VerificationDetails | None = None
