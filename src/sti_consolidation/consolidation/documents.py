"""Turn untrusted extractor output into parsed documents."""

import logging
from datetime import datetime

from ..config import DEFAULT_CONFIG, VerificationConfig
from ..normalizers.results import standardize_result
from ..normalizers.test_names import normalize_test_name
from ..schemas.common import RawTestObservation, VerificationDetails
from ..schemas.lab_report import LabExtraction, PatientProfile
from ..schemas.parsed_document import ParsedDocument
from ..validators.collection_date import parse_collection_date
from ..validators.verification import match_names, score_document
from .classification import FULL_PANEL, determine_test_type

logger = logging.getLogger(__name__)


def build_parsed_document(
    extraction: LabExtraction,
    profile: PatientProfile | None,
    now: datetime,
    upload_time: datetime | None = None,
    config: VerificationConfig = DEFAULT_CONFIG.verification,
) -> ParsedDocument:
    """Normalize one extraction and score its authenticity.

    A full panel detected from the tests overrides the declared test type;
    otherwise the declared type is kept when present.
    """
    tests = [
        RawTestObservation(
            name=normalize_test_name(test.name),
            result_text=test.result,
            status=standardize_result(test.result),
        )
        for test in extraction.tests
    ]

    detected_type = determine_test_type(tests)
    test_type = detected_type if detected_type == FULL_PANEL else (extraction.test_type or detected_type)

    parsed_date = parse_collection_date(extraction.collection_date)
    verification = score_document(extraction, profile, now, upload_time, config)

    logger.info(
        "Parsed document: %d tests, type %s, verification score %d",
        len(tests),
        test_type,
        verification.score,
    )

    return ParsedDocument(
        collection_date=parsed_date.date() if parsed_date else None,
        test_type=test_type,
        tests=tests,
        notes=extraction.notes,
        is_verified=verification.is_verified,
        verification_result=verification,
        verification_details=VerificationDetails(
            lab_name=extraction.lab_name,
            patient_name=extraction.patient_name,
            has_health_card=extraction.health_card_present,
            has_accession_number=bool(extraction.accession_number),
            name_matched=match_names(extraction.patient_name, profile),
        ),
    )
