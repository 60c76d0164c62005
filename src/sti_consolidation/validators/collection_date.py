"""Sanity checks on a document's collection date."""

from datetime import date, datetime, timedelta, timezone

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, VerificationConfig

_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%d-%b-%Y",
)


class DateValidation(BaseModel):
    """Outcome of validating one collection date."""

    is_valid: bool = False
    is_future: bool = False
    is_older_than_2_years: bool = False
    is_suspiciously_fast: bool = False
    parsed_date: datetime | None = None
    details: str = ""


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_collection_date(value: str | date | None) -> datetime | None:
    """Parse an ISO 8601 or common long-form date string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = value.strip()
    if not text:
        return None
    try:
        return _naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def validate_collection_date(
    value: str | date | None,
    now: datetime,
    upload_time: datetime | None = None,
    config: VerificationConfig = DEFAULT_CONFIG.verification,
) -> DateValidation:
    """Validate a collection date against the upload time.

    Checks run in order and the first hit decides: missing, unparseable,
    in the future (invalid), older than the maximum age (valid but flagged),
    collected just before upload (valid but flagged).
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return DateValidation(details="No collection date provided")

    parsed = parse_collection_date(value)
    if parsed is None:
        return DateValidation(
            details=f'Unable to parse date: expected YYYY-MM-DD or ISO 8601, received "{value}"'
        )

    reference = _naive_utc(upload_time or now)
    elapsed = reference - parsed

    if elapsed < timedelta(0):
        return DateValidation(
            is_future=True,
            parsed_date=parsed,
            details="Collection date is in the future",
        )

    if elapsed > timedelta(days=config.max_age_days):
        return DateValidation(
            is_valid=True,
            is_older_than_2_years=True,
            parsed_date=parsed,
            details="Collection date is more than 2 years old",
        )

    if upload_time is not None and elapsed < timedelta(hours=config.suspicious_gap_hours):
        return DateValidation(
            is_valid=True,
            is_suspiciously_fast=True,
            parsed_date=parsed,
            details="Collection date is unusually close to upload time",
        )

    return DateValidation(is_valid=True, parsed_date=parsed, details="Collection date is valid")
