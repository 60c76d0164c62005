"""Canonical test names for the many label variants found on lab reports."""

import re

from .matching import AliasTable

UNKNOWN_TEST = "Unknown Test"

# Order is significant: partial matches resolve to the first key contained in
# the input.
TEST_NAME_TABLE = AliasTable(
    [
        # HIV
        ("HIV 1/2 AG/AB COMBO SCREEN", "HIV-1/2"),
        ("HIV1/2 AG/AB COMBO SCREEN", "HIV-1/2"),
        ("HIV 1/2 ANTIBODY", "HIV-1/2"),
        ("HIV FINAL INTERPRETATION", "HIV-1/2"),
        ("HIV-1/2 AG/AB", "HIV-1/2"),
        # Hepatitis
        ("HEPATITIS B SURFACE ANTIGEN", "Hepatitis B"),
        ("HEPATITIS B SURFACE AG", "Hepatitis B"),
        ("HBSAG", "Hepatitis B"),
        ("HEPATITIS B CORE", "Hepatitis B Core"),
        ("HEPATITIS C ANTIBODY", "Hepatitis C"),
        ("HEPATITIS C AB", "Hepatitis C"),
        ("HCV ANTIBODY", "Hepatitis C"),
        ("HEPATITIS A", "Hepatitis A"),
        # Syphilis
        ("SYPHILIS ANTIBODY SCREEN", "Syphilis"),
        ("SYPHILIS SEROLOGY", "Syphilis"),
        ("RPR", "Syphilis"),
        # Bacterial
        ("NEISSERIA GONORRHOEAE", "Gonorrhea"),
        ("N. GONORRHOEAE", "Gonorrhea"),
        ("CHLAMYDIA TRACHOMATIS", "Chlamydia"),
        ("C. TRACHOMATIS", "Chlamydia"),
        ("TRICHOMONAS VAGINALIS", "Trichomonas"),
        # Herpes
        ("HERPES SIMPLEX VIRUS 1", "HSV-1"),
        ("HSV-1", "HSV-1"),
        ("HERPES SIMPLEX VIRUS 2", "HSV-2"),
        ("HSV-2", "HSV-2"),
    ]
)

ACRONYMS = frozenset({"HIV", "HSV", "HPV", "HBV", "HCV", "HAV", "RPR", "STI", "STD"})

_LEADING_LETTERS = re.compile(r"^[A-Za-z]+")

_CHRONIC_STATUS_PATTERNS = [
    re.compile(r"hiv", re.IGNORECASE),
    re.compile(r"hsv[-\s]?[12]", re.IGNORECASE),
    re.compile(r"herpes", re.IGNORECASE),
    re.compile(r"hepatitis\s*[bc]", re.IGNORECASE),
    re.compile(r"hbv", re.IGNORECASE),
    re.compile(r"hcv", re.IGNORECASE),
]

# Aliases used to match test names against user-declared conditions.
CONDITION_ALIASES = AliasTable(
    [
        ("hsv-1", "HSV-1"),
        ("hsv1", "HSV-1"),
        ("hsv 1", "HSV-1"),
        ("herpes simplex virus 1", "HSV-1"),
        ("simplex 1", "HSV-1"),
        ("hsv-2", "HSV-2"),
        ("hsv2", "HSV-2"),
        ("hsv 2", "HSV-2"),
        ("herpes simplex virus 2", "HSV-2"),
        ("simplex 2", "HSV-2"),
        ("hiv", "HIV"),
        ("hepatitis b", "Hepatitis B"),
        ("hep b", "Hepatitis B"),
        ("hbv", "Hepatitis B"),
        ("hepatitis c", "Hepatitis C"),
        ("hep c", "Hepatitis C"),
        ("hcv", "Hepatitis C"),
        ("hpv", "HPV"),
        ("human papilloma", "HPV"),
        ("papilloma", "HPV"),
    ]
)


def _format_word(word: str) -> str:
    leading = _LEADING_LETTERS.match(word)
    if leading and leading.group(0).upper() in ACRONYMS:
        return word.upper()
    return word[:1].upper() + word[1:].lower()


def normalize_test_name(name: str | None) -> str:
    """Map a raw test label to its canonical name.

    Exact matches win, then the first table key contained in the label, then
    a title-cased fallback that keeps known acronyms upper-case.

    Examples:
        >>> normalize_test_name("HIV1/2 Ag/Ab Combo Screen")
        'HIV-1/2'
        >>> normalize_test_name("hepatitis b surface antigen")
        'Hepatitis B'
        >>> normalize_test_name("hpv dna")
        'HPV Dna'
    """
    if not name or not name.strip():
        return UNKNOWN_TEST

    cleaned = " ".join(name.split())
    upper = cleaned.upper()

    exact = TEST_NAME_TABLE.exact(upper)
    if exact:
        return exact

    # Canonical names map to themselves so normalization is idempotent.
    for canonical in TEST_NAME_TABLE.canonicals:
        if canonical.upper() == upper:
            return canonical

    partial = TEST_NAME_TABLE.contains(upper)
    if partial:
        return partial

    return " ".join(_format_word(word) for word in cleaned.split())


def is_chronic_status_test(name: str | None) -> bool:
    """Whether a test tracks a persistent status condition.

    HIV, herpes and hepatitis B/C qualify. Hepatitis A is curable and does not.
    """
    if not name:
        return False
    return any(pattern.search(name) for pattern in _CHRONIC_STATUS_PATTERNS)
