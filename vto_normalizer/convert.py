"""
Primitive converters used by the export pipeline.

- ASCII transliteration for the PDF font
- ISO date -> long human date, without timezone shifting
- free text -> filesystem-safe base filename
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from .rules import (
    ASCII_REPLACEMENTS,
    DEFAULT_FILENAME,
    MAX_FILENAME_LENGTH,
    MONTH_NAMES,
)

_ASCII_TABLE = str.maketrans(ASCII_REPLACEMENTS)

_DATE_PART = re.compile(r"[0-9]+")
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9 _-]")
_SPACE_RUN = re.compile(r" +")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def to_ascii(text: Any) -> str:
    if not text:
        return ""
    return str(text).translate(_ASCII_TABLE)


def format_date(value: Any) -> str:
    """
    Render ``YYYY-MM-DD`` as ``January 15, 2025``.

    The date is built from the literal components, so the calendar day
    never drifts. Anything that is not three integer parts, or is not a
    real calendar day, is returned unchanged.
    """
    if not value:
        return ""

    value = str(value)
    parts = value.split("-")
    if len(parts) != 3 or not all(_DATE_PART.fullmatch(p) for p in parts):
        return value

    year, month, day = (int(p) for p in parts)
    try:
        d = date(year, month, day)
    except ValueError:
        return value

    return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


def sanitize_filename(name: Any) -> str:
    if not name:
        return DEFAULT_FILENAME

    cleaned = _UNSAFE_FILENAME_CHARS.sub("", str(name))
    cleaned = _SPACE_RUN.sub("-", cleaned)
    cleaned = _EDGE_HYPHENS.sub("", cleaned)
    cleaned = cleaned[:MAX_FILENAME_LENGTH]

    return cleaned or DEFAULT_FILENAME
