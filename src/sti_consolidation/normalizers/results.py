"""Map free-text lab results to a standardized status."""

import logging
import re

from ..schemas.common import TestStatus

logger = logging.getLogger(__name__)

# Negative patterns are checked first so "not detected" never reads as positive.
_NEGATIVE = re.compile(
    r"^negative$|^non-reactive$|^nonreactive$|^not detected$|^absent$"
    r"|no evidence|no antibodies detected|no hiv.*detected"
)
_IMMUNE = re.compile(r"evidence of immunity|^immune$")
_POSITIVE = re.compile(r"^positive$|^reactive$|^detected$|antibodies detected|hiv.*detected")
_INCONCLUSIVE = re.compile(r"indeterminate|equivocal|borderline|unclear|inconclusive")
_NUMERIC = re.compile(r"^\d+\.?\d*\s*[a-z/]*$")


def standardize_result(result: str | None) -> TestStatus:
    """Classify a result string such as ``"Non-Reactive"`` or ``"HIV-1 detected"``.

    Numeric readings and unrecognized text stay pending for review.
    """
    if not result or not result.strip():
        return TestStatus.PENDING

    cleaned = " ".join(result.lower().split()).rstrip(".")

    if _NEGATIVE.search(cleaned) or _IMMUNE.search(cleaned):
        return TestStatus.NEGATIVE
    if _POSITIVE.search(cleaned):
        return TestStatus.POSITIVE
    if _INCONCLUSIVE.search(cleaned):
        return TestStatus.INCONCLUSIVE
    if _NUMERIC.match(cleaned):
        return TestStatus.PENDING

    logger.debug("Unrecognized result text, leaving pending")
    return TestStatus.PENDING
