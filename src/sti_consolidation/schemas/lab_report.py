"""Lab report extraction schema."""

from pydantic import BaseModel, field_validator


class ExtractedTest(BaseModel):
    """Individual test row as returned by the structured extractor."""

    name: str = ""
    result: str = ""

    @field_validator("name", "result", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class LabExtraction(BaseModel):
    """Best-effort structured fields for one uploaded page or image.

    Produced by the upstream extractor and treated as untrusted.
    """

    collection_date: str | None = None
    test_type: str | None = None
    tests: list[ExtractedTest] = []
    notes: str | None = None
    lab_name: str | None = None
    patient_name: str | None = None
    health_card_present: bool = False
    accession_number: str | None = None
    raw_text: str | None = None

    @field_validator("tests", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v

    @field_validator("health_card_present", mode="before")
    @classmethod
    def _none_to_false(cls, v):
        return False if v is None else v


class PatientProfile(BaseModel):
    """Account holder name used for the name-match check."""

    first_name: str | None = None
    last_name: str | None = None
