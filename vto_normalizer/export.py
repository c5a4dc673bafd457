"""
Export text pipeline.

Produces the exact strings handed to the PDF renderer: every field is
transliterated to ASCII (dates are formatted first), then bounded again,
since transliteration can lengthen a string (an ellipsis becomes "...").
"""

from __future__ import annotations

from typing import Any, Dict

from .convert import format_date, sanitize_filename, to_ascii
from .normalize import normalize_document
from .rules import (
    DATE_FIELDS,
    MAX_STRING_LENGTH,
    SCALAR_FIELDS,
    SIMPLE_LIST_FIELDS,
    STRUCTURED_LIST_FIELDS,
)

EXPORT_SUFFIX = "-VTO"


def _pdf_text(value: str) -> str:
    return to_ascii(value)[:MAX_STRING_LENGTH]


def export_filename(doc: Dict[str, Any], extension: str = "") -> str:
    """Base filename from the company name, e.g. ``Acme-Corp-VTO.pdf``."""
    base = sanitize_filename(doc.get("companyName"))
    return f"{base}{EXPORT_SUFFIX}{extension}"


def build_export_text(raw: Any) -> Dict[str, Any]:
    doc = normalize_document(raw)
    out: Dict[str, Any] = {}

    for field in SCALAR_FIELDS:
        value = doc[field]
        if field in DATE_FIELDS:
            value = format_date(value)
        out[field] = _pdf_text(value)

    for field in SIMPLE_LIST_FIELDS:
        out[field] = [_pdf_text(item) for item in doc[field]]

    for field in STRUCTURED_LIST_FIELDS:
        out[field] = [
            {sub: _pdf_text(text) for sub, text in item.items()}
            for item in doc[field]
        ]

    out["filename"] = sanitize_filename(doc["companyName"])
    out["pdfFilename"] = export_filename(doc, ".pdf")
    out["jsonFilename"] = export_filename(doc, ".json")
    return out
