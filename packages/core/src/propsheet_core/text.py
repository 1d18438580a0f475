"""Text normalization helpers for extracted listing-sheet text."""

import re

_NON_LETTER = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")


def split_lines(text: str) -> list[str]:
    """Split raw document text into trimmed, non-empty lines."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def normalize_area(text: str) -> str:
    """Normalize an area heading to its stored form.

    Lowercases, replaces anything that is not a letter or whitespace with a
    space and collapses whitespace. Applying it twice gives the same result.

    >>> normalize_area("  Vasant-Vihar. ")
    'vasant vihar'
    """
    return collapse_whitespace(_NON_LETTER.sub(" ", text.lower()))
