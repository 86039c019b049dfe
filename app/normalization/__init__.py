"""
app/normalization package marker.
"""

from app.normalization.text import (
    format_number,
    normalize_key,
    normalize_text,
    parse_number,
    strip_diacritics,
)

__all__ = [
    "format_number",
    "normalize_key",
    "normalize_text",
    "parse_number",
    "strip_diacritics",
]
