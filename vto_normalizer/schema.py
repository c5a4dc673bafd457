from __future__ import annotations

from typing import Any, Dict, Tuple

from .rules import SCALAR_FIELDS, SIMPLE_LIST_FIELDS, STRUCTURED_LIST_FIELDS

DOCUMENT_FIELDS: Tuple[str, ...] = (
    SCALAR_FIELDS + SIMPLE_LIST_FIELDS + tuple(STRUCTURED_LIST_FIELDS)
)


def default_item(list_field: str) -> Dict[str, str]:
    """Default-shaped item for a structured list field (``rocks``/``issues``)."""
    return {sub: "" for sub in STRUCTURED_LIST_FIELDS[list_field]}


def default_document() -> Dict[str, Any]:
    """
    Build a fresh VTO document with every canonical field at its default.

    Each call allocates new containers; two documents never share a list.
    """
    doc: Dict[str, Any] = {field: "" for field in SCALAR_FIELDS}
    for field in SIMPLE_LIST_FIELDS:
        doc[field] = []
    for field in STRUCTURED_LIST_FIELDS:
        doc[field] = []
    return doc
