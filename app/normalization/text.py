"""
app/normalization/text.py

Text canonicalization shared by schema reconciliation and query resolution.
"""

from __future__ import annotations

import math
import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_KEY_SEPARATOR_RE = re.compile(r"[\s/]+")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def strip_diacritics(value: str) -> str:
    """
    Remove combining marks (á -> a, ñ -> n) while keeping base characters.
    """

    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(value: str | None) -> str:
    """
    Fold free text for matching: lowercase, no diacritics, single spaces.
    """

    if not value:
        return ""
    folded = strip_diacritics(value).lower()
    return _WHITESPACE_RE.sub(" ", folded).strip()


def normalize_key(value: str | None) -> str:
    """
    Canonical column key: trimmed, uppercase, diacritic-free, with every run
    of whitespace or slashes collapsed to one underscore.

    Idempotent: ``normalize_key(normalize_key(x)) == normalize_key(x)``.
    """

    if not value:
        return ""
    folded = strip_diacritics(value.strip()).upper()
    return _KEY_SEPARATOR_RE.sub("_", folded)


def parse_number(value: str | None) -> float | None:
    """
    Coerce a spreadsheet cell to a number.

    Every character other than digits, ``-`` and ``.`` is discarded first.
    Returns None (unknown) when nothing parseable or finite remains.
    """

    if value is None:
        return None
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return None
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def format_number(value: float | None) -> str:
    """Render counts without a trailing ``.0`` when they are integral."""
    if value is None:
        return "?"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
