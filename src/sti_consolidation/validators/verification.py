"""Document authenticity scoring and per-date merging of scores.

Each document is scored against a fixed catalogue of weighted checks. When a
visit spans several uploads, the per-document results are merged so evidence
found on any page counts toward the visit.
"""

import logging
from datetime import datetime

from ..config import DEFAULT_CONFIG, VerificationConfig
from ..normalizers.lab_names import matches_recognized_lab
from ..normalizers.lab_registry import find_lab_by_name
from ..schemas.common import VerificationCheck, VerificationLevel, VerificationResult
from ..schemas.lab_report import LabExtraction, PatientProfile
from .collection_date import validate_collection_date

logger = logging.getLogger(__name__)

CHECK_ORDER = (
    "recognized_lab",
    "health_card",
    "accession_number",
    "name_match",
    "collection_date",
    "structural_completeness",
    "multi_signal_agreement",
)


def score_to_level(
    score: int, config: VerificationConfig = DEFAULT_CONFIG.verification
) -> VerificationLevel:
    """Map a score to its level using the configured cut points."""
    for threshold in config.levels:
        if score >= threshold.min_score:
            return threshold.level
    return VerificationLevel.NO_SIGNALS


def _name_parts(name: str) -> list[str]:
    return [part for part in name.lower().split() if part]


def match_names(extracted_name: str | None, profile: PatientProfile | None) -> bool:
    """Whether the name printed on a report belongs to the profile holder.

    Order-insensitive: "SMITH, JOHN" matches John Smith. Two name parts must
    match, or one when the profile only has one.
    """
    if not extracted_name or profile is None:
        return False

    user_parts = _name_parts(profile.first_name or "") + _name_parts(profile.last_name or "")
    if not user_parts:
        return False

    extracted_parts = _name_parts(extracted_name.replace(",", " "))
    matched = [
        part
        for part in user_parts
        if any(
            extracted == part or part in extracted or extracted in part
            for extracted in extracted_parts
        )
    ]
    return len(matched) >= min(2, len(user_parts))


def _check(
    name: str,
    passed: bool,
    config: VerificationConfig,
    points: int | None = None,
    details: str | None = None,
) -> VerificationCheck:
    max_points = config.weights[name]
    if points is None:
        points = max_points if passed else 0
    return VerificationCheck(
        name=name,
        passed=passed,
        points=points,
        max_points=max_points,
        details=details,
    )


def score_document(
    extraction: LabExtraction,
    profile: PatientProfile | None,
    now: datetime,
    upload_time: datetime | None = None,
    config: VerificationConfig = DEFAULT_CONFIG.verification,
) -> VerificationResult:
    """Score one extracted document.

    Verified documents clear the score threshold, carry no future collection
    date and, when a profile is supplied, match the profile holder's name.
    """
    is_recognized_lab = matches_recognized_lab(extraction.lab_name)
    has_health_card = extraction.health_card_present
    accession = (extraction.accession_number or "").strip()
    name_matched = match_names(extraction.patient_name, profile)
    date_check = validate_collection_date(extraction.collection_date, now, upload_time, config)

    checks = [
        _check(
            "recognized_lab",
            is_recognized_lab,
            config,
            details=None if is_recognized_lab else "Laboratory not recognized",
        ),
        _check("health_card", has_health_card, config),
    ]

    if accession:
        lab = find_lab_by_name(extraction.lab_name)
        if lab is not None and lab.accepts_accession(accession):
            checks.append(_check("accession_number", True, config, details=f"Matches {lab.canonical_name} format"))
        else:
            checks.append(
                _check(
                    "accession_number",
                    True,
                    config,
                    points=config.partial_accession_points,
                    details="Present but format not verified",
                )
            )
    else:
        checks.append(_check("accession_number", False, config))

    checks.append(
        _check(
            "name_match",
            name_matched,
            config,
            details=None if profile is not None else "No profile to compare",
        )
    )
    checks.append(
        _check(
            "collection_date",
            date_check.is_valid and not date_check.is_future,
            config,
            details=date_check.details,
        )
    )
    checks.append(
        _check(
            "structural_completeness",
            bool(extraction.tests) and bool(extraction.test_type),
            config,
        )
    )
    signals = sum([is_recognized_lab, has_health_card, bool(accession), name_matched])
    checks.append(
        _check(
            "multi_signal_agreement",
            signals >= config.multi_signal_minimum,
            config,
            details=f"{signals} identity signals",
        )
    )

    score = sum(check.points for check in checks)
    name_gate = name_matched if profile is not None else True
    result = VerificationResult(
        score=score,
        level=score_to_level(score, config),
        checks=checks,
        is_verified=score >= config.verified_threshold and name_gate and not date_check.is_future,
        has_future_date=date_check.is_future,
        is_suspiciously_fast=date_check.is_suspiciously_fast,
        is_older_than_2_years=date_check.is_older_than_2_years,
    )
    if date_check.is_future:
        logger.warning("Document has a future collection date")
    return result


def merge_verification_results(
    results: list[VerificationResult],
    config: VerificationConfig = DEFAULT_CONFIG.verification,
) -> VerificationResult | None:
    """Merge per-document results for one date group.

    A check passes if it passed on any document and then earns its full
    weight, so a partial accession match on one page still counts in full
    once merged. The date flags are OR-reduced, and a future date on any
    document vetoes verification.
    """
    if not results:
        return None

    best: dict[str, VerificationCheck] = {}
    for result in results:
        for check in result.checks:
            current = best.get(check.name)
            if current is None or (check.passed and not current.passed):
                best[check.name] = check

    ordered = [best.pop(name) for name in CHECK_ORDER if name in best]
    ordered.extend(best.values())
    ordered = [
        check.model_copy(update={"points": check.max_points}) if check.passed else check for check in ordered
    ]

    score = sum(check.points for check in ordered)
    has_future_date = any(r.has_future_date for r in results)
    return VerificationResult(
        score=score,
        level=score_to_level(score, config),
        checks=ordered,
        is_verified=score >= config.verified_threshold and not has_future_date,
        has_future_date=has_future_date,
        is_suspiciously_fast=any(r.is_suspiciously_fast for r in results),
        is_older_than_2_years=any(r.is_older_than_2_years for r in results),
    )
