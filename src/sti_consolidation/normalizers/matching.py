"""Ordered alias matching shared by the test-name, lab-name and condition normalizers.

Tables are ordered lists of ``(alias, canonical)`` pairs. Every lookup scans
in declaration order and the first hit wins, so reordering a table changes
results.
"""

from collections.abc import Iterable


class AliasTable:
    """Case-insensitive alias lookup over an ordered pair list."""

    def __init__(self, entries: Iterable[tuple[str, str]]):
        self.entries: list[tuple[str, str]] = [
            (alias.lower(), canonical) for alias, canonical in entries
        ]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def canonicals(self) -> list[str]:
        """Distinct canonical values in first-declared order."""
        return list(dict.fromkeys(canonical for _, canonical in self.entries))

    def exact(self, text: str) -> str | None:
        """Return the canonical value of an alias equal to ``text``."""
        needle = (text or "").strip().lower()
        if not needle:
            return None
        for alias, canonical in self.entries:
            if alias == needle:
                return canonical
        return None

    def prefix(self, text: str) -> tuple[str, str] | None:
        """Return ``(alias, canonical)`` for an alias that starts ``text`` as a whole word."""
        needle = (text or "").strip().lower()
        if not needle:
            return None
        for alias, canonical in self.entries:
            if needle.startswith(alias + " "):
                return alias, canonical
        return None

    def contains(self, text: str) -> str | None:
        """Return the canonical value of the first alias found inside ``text``."""
        needle = (text or "").lower()
        if not needle:
            return None
        for alias, canonical in self.entries:
            if alias in needle:
                return canonical
        return None

    def same_family(self, left: str, right: str) -> bool:
        """Whether two strings are equal or resolve to the same canonical value."""
        if not left or not right:
            return False
        if left.strip().lower() == right.strip().lower():
            return True
        family = self.contains(left)
        return family is not None and family == self.contains(right)
