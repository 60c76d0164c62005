"""Laboratory name normalization and recognized-lab matching."""

import re

from .lab_registry import GENERIC_LAB_WORDS, find_lab_by_name
from .matching import AliasTable

# Normalized names of laboratories whose reports carry weight in verification.
RECOGNIZED_LAB_NAMES: tuple[str, ...] = (
    # Canada
    "lifelabs",
    "public health ontario",
    "dynacare",
    "bc cdc",
    "alberta precision labs",
    "gamma-dynacare",
    "medlabs",
    "bio-test",
    "idexx",
    "hassle free clinic",
    "mapletree medical",
    "dynalife",
    "biron",
    "cml healthcare",
    "calgary lab services",
    "cadham provincial",
    "roy romanow provincial",
    # United States
    "quest diagnostics",
    "labcorp",
    "bioreference labs",
    "arup labs",
    "mayo clinic labs",
    "sonic healthcare",
    "clinical pathology labs",
    # United Kingdom
    "uk health security agency",
    "nhs blood and transplant",
)

LAB_ABBREVIATIONS = AliasTable(
    [
        ("pho", "public health ontario"),
        ("apl", "alberta precision labs"),
        ("bccdc", "bc cdc"),
        ("hfc", "hassle free clinic"),
        ("quest", "quest diagnostics"),
        ("ukhsa", "uk health security agency"),
        ("nhsbt", "nhs blood and transplant"),
    ]
)

# Longest first so "medical laboratory inc" collapses completely.
LAB_SUFFIXES: tuple[str, ...] = tuple(
    sorted(
        (
            "medical laboratory",
            "medical lab",
            "laboratory",
            "lab",
            "incorporated",
            "inc",
            "limited",
            "ltd",
        ),
        key=len,
        reverse=True,
    )
)

_SUFFIX_PATTERNS = [re.compile(rf"\s+{re.escape(suffix)}$") for suffix in LAB_SUFFIXES]
_LABORATORIES = re.compile(r"\blaboratories\b")
_TRAILING_PUNCTUATION = re.compile(r"[.,]+$")
_SEPARATORS = re.compile(r"[\s-]+")


def _expand_abbreviation(normalized: str) -> str:
    expanded = LAB_ABBREVIATIONS.exact(normalized)
    if expanded:
        return expanded
    match = LAB_ABBREVIATIONS.prefix(normalized)
    if match:
        alias, expansion = match
        if not normalized.startswith(expansion):
            return expansion + normalized[len(alias):]
    return normalized


def _strip_suffixes(normalized: str) -> str:
    previous = None
    while previous != normalized:
        previous = normalized
        normalized = _TRAILING_PUNCTUATION.sub("", normalized).strip()
        for pattern in _SUFFIX_PATTERNS:
            stripped = pattern.sub("", normalized)
            if stripped != normalized:
                normalized = stripped.strip()
                break
    return normalized


def normalize_lab_name(lab_name: str | None) -> str:
    """Normalize a laboratory name for comparison.

    Lowercases, collapses whitespace, expands known abbreviations, rewrites
    "laboratories" to "labs" and strips corporate suffixes.

    Examples:
        >>> normalize_lab_name("LifeLabs Medical Laboratory Inc")
        'lifelabs'
        >>> normalize_lab_name("PHO Laboratory")
        'public health ontario'
        >>> normalize_lab_name("Alberta Precision Laboratories")
        'alberta precision labs'
    """
    if not lab_name:
        return ""

    normalized = " ".join(lab_name.lower().split())
    if not normalized:
        return ""

    normalized = _expand_abbreviation(normalized)
    normalized = _LABORATORIES.sub("labs", normalized)
    normalized = _strip_suffixes(normalized)
    # A bare abbreviation can surface once its suffix is gone ("HFC Inc.").
    return _expand_abbreviation(normalized)


def _matches_by_words(normalized: str, lab: str) -> bool:
    words = [w for w in _SEPARATORS.split(normalized) if w]
    if not words:
        return False

    if len(words) == 1:
        word = words[0]
        return len(word) >= 6 and word not in GENERIC_LAB_WORDS and word in lab

    lab_words = [w for w in _SEPARATORS.split(lab) if w]
    if not all(word in lab for word in words):
        return False
    overlap = sum(1 for word in lab_words if word in words)
    return overlap / len(lab_words) >= 0.8


def matches_recognized_lab(lab_name: str | None) -> bool:
    """Whether a laboratory name refers to a recognized laboratory.

    Surrounding text is tolerated ("Medical Services by LifeLabs"), and
    spacing or hyphenation differences are ignored. Short fragments such as
    "lab" never match.
    """
    normalized = normalize_lab_name(lab_name)
    if not normalized:
        return False

    if any(lab in normalized for lab in RECOGNIZED_LAB_NAMES):
        return True

    compact = _SEPARATORS.sub("", normalized)
    if any(_SEPARATORS.sub("", lab) in compact for lab in RECOGNIZED_LAB_NAMES):
        return True

    if any(_matches_by_words(normalized, lab) for lab in RECOGNIZED_LAB_NAMES):
        return True

    return find_lab_by_name(lab_name) is not None


# Deprecated: kept for callers written before US and UK labs were added.
matches_canadian_lab = matches_recognized_lab
