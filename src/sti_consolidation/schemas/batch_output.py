"""Output schemas for the batch consolidation workflow."""

from typing import Literal

from pydantic import BaseModel

from .date_group import DateGroup
from .parsed_document import ParsedDocument


class ContentFingerprint(BaseModel):
    """Exact digest plus 64-bit SimHash of a document's text."""

    hash: str
    simhash: str


class DuplicateMatch(BaseModel):
    """A previously seen upload that the candidate duplicates."""

    kind: Literal["exact", "near"]
    index: int
    distance: int


class ConsolidatedBatch(BaseModel):
    """Complete output from the batch consolidation workflow."""

    batch_id: str
    documents: list[ParsedDocument] = []
    fingerprints: list[ContentFingerprint | None] = []
    duplicates: list[DuplicateMatch | None] = []
    date_groups: list[DateGroup] = []
    conflict_count: int = 0
    warnings: list[str] = []
