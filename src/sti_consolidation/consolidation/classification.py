"""Panel labels derived from the disease families a visit covered."""

import re
from collections.abc import Iterable

from ..schemas.common import RawTestObservation

DEFAULT_TEST_TYPE = "STI Panel"
FULL_PANEL = "Full STI Panel"

# Family name -> patterns matched against the lowercased test name.
# Within one test name, families are checked in this order.
TEST_FAMILIES: dict[str, tuple[re.Pattern, ...]] = {
    "HIV": (re.compile(r"hiv"),),
    "Hepatitis A": (re.compile(r"hepatitis a|hep a"), re.compile(r"^hav$")),
    "Hepatitis B": (re.compile(r"hepatitis b|hep b"), re.compile(r"^hbv$")),
    "Hepatitis C": (re.compile(r"hepatitis c|hep c"), re.compile(r"^hcv$")),
    "Syphilis": (re.compile(r"syphilis|rpr|vdrl"),),
    "Gonorrhea": (re.compile(r"gonorrh|neisseria|\bgc\b"),),
    "Chlamydia": (re.compile(r"chlamydia|\bct\b"),),
    "Herpes": (re.compile(r"herpes|hsv"),),
}


def families_covered(tests: Iterable[RawTestObservation]) -> list[str]:
    """Distinct families covered by the tests, in order of first appearance."""
    families: dict[str, None] = {}
    for test in tests:
        name = test.name.lower()
        for family, patterns in TEST_FAMILIES.items():
            if any(pattern.search(name) for pattern in patterns):
                families.setdefault(family)
    return list(families)


def determine_test_type(
    tests: list[RawTestObservation],
    declared_types: Iterable[str | None] = (),
) -> str:
    """Label a set of tests.

    Four or more families make a full panel, two or three are listed by
    name, and a single family is a test. Without tests the first declared
    type is kept.
    """
    if not tests:
        return next((t for t in declared_types if t and t.strip()), DEFAULT_TEST_TYPE)

    families = families_covered(tests)
    if len(families) >= 4:
        return FULL_PANEL
    if len(families) >= 2:
        return " & ".join(families[:3]) + " Panel"
    if len(families) == 1:
        return f"{families[0]} Test"
    return DEFAULT_TEST_TYPE
