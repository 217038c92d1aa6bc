"""
Text canonicalization shared by both matching tiers.
"""

import re

_WHITESPACE = re.compile(r"\s+")
_LEADING_MARKERS = re.compile(r"^[\s•\-\*]+")

# Curly single and double quotes all fold to a plain apostrophe.
_QUOTES = str.maketrans({"‘": "'", "’": "'", "“": "'", "”": "'"})


def normalize(text: str) -> str:
    """
    Canonical form used for comparison only, never for output.

    Collapses whitespace runs, unifies typographic quotes, trims and
    lower-cases. Accents are left alone.
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).translate(_QUOTES).strip().lower()


def clean_new_content(text: str) -> str:
    """Strips leading bullet/dash markers that models like to prepend."""
    if not text:
        return ""
    return _LEADING_MARKERS.sub("", text).strip()
