"""Lab result batch consolidation workflow.

A 4-step pipeline for one upload session:
1. Normalizes each extraction into a scored parsed document
2. Fingerprints document text and flags duplicate uploads
3. Consolidates documents into one record per collection date
4. Summarizes the batch for the persistence layer
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import BaseModel
from workflows import Context, Workflow, step
from workflows.events import Event, StartEvent, StopEvent
from workflows.resource import Resource

from .config import ConsolidationConfig, load_config
from .consolidation import build_parsed_document, consolidate_documents
from .schemas import (
    ConsolidatedBatch,
    ContentFingerprint,
    DateGroup,
    DuplicateMatch,
    LabExtraction,
    ParsedDocument,
    PatientProfile,
)
from .validators import classify_duplicate, generate_content_hash

logger = logging.getLogger(__name__)


def get_config() -> ConsolidationConfig:
    """Scoring, reminder and duplicate settings from ``configs/config.json``."""
    return load_config()


# --- Events ---


class BatchStartEvent(StartEvent):
    """Start event with the extractor output for one upload session."""

    extractions: list[LabExtraction]
    profile: PatientProfile | None = None
    uploaded_at: datetime | None = None
    # Fingerprints of earlier uploads, checked for re-uploads.
    known_fingerprints: list[ContentFingerprint | None] = []


class StatusEvent(Event):
    """Progress status update for the client."""

    message: str
    level: Literal["info", "warning", "error"] = "info"


class DocumentsParsedEvent(Event):
    """Emitted after every extraction is normalized and scored."""

    pass


class FingerprintsComputedEvent(Event):
    """Emitted after document text is fingerprinted."""

    pass


class DocumentsConsolidatedEvent(Event):
    """Emitted after documents are grouped by collection date."""

    pass


# --- Workflow State ---


class WorkflowState(BaseModel):
    """State persisted across workflow steps."""

    batch_id: str = ""
    raw_texts: list[str | None] = []
    known_fingerprints: list[ContentFingerprint | None] = []
    documents: list[ParsedDocument] = []
    fingerprints: list[ContentFingerprint | None] = []
    duplicates: list[DuplicateMatch | None] = []
    date_groups: list[DateGroup] = []
    warnings: list[str] = []


# --- Workflow ---


class ConsolidationWorkflow(Workflow):
    """Merge the documents of one upload session into per-visit records."""

    @step()
    async def parse_documents(
        self,
        event: BatchStartEvent,
        ctx: Context[WorkflowState],
        config: Annotated[ConsolidationConfig, Resource(get_config)],
    ) -> DocumentsParsedEvent:
        """Normalize test names and results and score each document."""
        batch_id = str(uuid.uuid4())[:8]
        now = event.uploaded_at or datetime.now(timezone.utc)

        ctx.write_event_to_stream(
            StatusEvent(message=f"Processing {len(event.extractions)} documents...")
        )

        documents = [
            build_parsed_document(
                extraction,
                event.profile,
                now,
                upload_time=event.uploaded_at,
                config=config.verification,
            )
            for extraction in event.extractions
        ]

        warnings: list[str] = []
        for index, doc in enumerate(documents):
            if doc.verification_result and doc.verification_result.has_future_date:
                message = f"Document {index + 1} has a collection date in the future"
                warnings.append(message)
                ctx.write_event_to_stream(StatusEvent(message=message, level="warning"))

        async with ctx.store.edit_state() as state:
            state.batch_id = batch_id
            state.raw_texts = [extraction.raw_text for extraction in event.extractions]
            state.known_fingerprints = event.known_fingerprints
            state.documents = documents
            state.warnings = warnings

        logger.info("Batch %s: parsed %d documents", batch_id, len(documents))
        return DocumentsParsedEvent()

    @step()
    async def fingerprint_documents(
        self,
        event: DocumentsParsedEvent,
        ctx: Context[WorkflowState],
        config: Annotated[ConsolidationConfig, Resource(get_config)],
    ) -> FingerprintsComputedEvent:
        """Hash each document's text and flag repeated uploads."""
        state = await ctx.store.get_state()

        async def _fingerprint(text: str | None) -> ContentFingerprint | None:
            if not text or not text.strip():
                return None
            return await generate_content_hash(text)

        fingerprints = list(await asyncio.gather(*(_fingerprint(t) for t in state.raw_texts)))

        # Earlier documents in the same batch count as prior uploads.
        seen = list(state.known_fingerprints)
        duplicates: list[DuplicateMatch | None] = []
        warnings: list[str] = []
        for index, fingerprint in enumerate(fingerprints):
            match = classify_duplicate(fingerprint, seen, config.duplicates) if fingerprint else None
            duplicates.append(match)
            seen.append(fingerprint)
            if match is not None:
                message = f"Document {index + 1} duplicates an earlier upload ({match.kind} match)"
                warnings.append(message)
                ctx.write_event_to_stream(StatusEvent(message=message, level="warning"))

        async with ctx.store.edit_state() as state:
            state.fingerprints = fingerprints
            state.duplicates = duplicates
            state.warnings = state.warnings + warnings

        return FingerprintsComputedEvent()

    @step()
    async def consolidate(
        self,
        event: FingerprintsComputedEvent,
        ctx: Context[WorkflowState],
        config: Annotated[ConsolidationConfig, Resource(get_config)],
    ) -> DocumentsConsolidatedEvent:
        """Group documents by collection date and resolve conflicts."""
        state = await ctx.store.get_state()

        ctx.write_event_to_stream(StatusEvent(message="Consolidating results by date..."))

        date_groups = consolidate_documents(state.documents, config.verification)

        warnings: list[str] = []
        for group in date_groups:
            label = group.date.isoformat() if group.date else "undated documents"
            for conflict in group.conflicts:
                statuses = " vs ".join(s.value for s in conflict.conflicting_statuses)
                message = (
                    f"{conflict.test_name} on {label}: {statuses}, "
                    f"using {conflict.resolved_status.value}"
                )
                warnings.append(message)
                ctx.write_event_to_stream(StatusEvent(message=message, level="warning"))

        async with ctx.store.edit_state() as state:
            state.date_groups = date_groups
            state.warnings = state.warnings + warnings

        return DocumentsConsolidatedEvent()

    @step()
    async def summarize(
        self,
        event: DocumentsConsolidatedEvent,
        ctx: Context[WorkflowState],
    ) -> StopEvent:
        """Package the consolidated batch for storage."""
        state = await ctx.store.get_state()

        output = ConsolidatedBatch(
            batch_id=state.batch_id,
            documents=state.documents,
            fingerprints=state.fingerprints,
            duplicates=state.duplicates,
            date_groups=state.date_groups,
            conflict_count=sum(len(group.conflicts) for group in state.date_groups),
            warnings=state.warnings,
        )

        ctx.write_event_to_stream(
            StatusEvent(message=f"Consolidated into {len(state.date_groups)} date groups")
        )

        return StopEvent(result=output.model_dump(mode="json"))


workflow = ConsolidationWorkflow(timeout=None)
