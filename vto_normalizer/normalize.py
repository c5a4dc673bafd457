"""
Core normalization logic.

Responsibilities:
- coerce any JSON-decoded value into the canonical VTO document
- enforce string length and list size bounds
- consult only the input's own keys
- report every anomaly that was absorbed
- decode uploaded/persisted bytes (encoding detection + JSON parsing)

Nothing in here raises for a malformed *document*; only undecodable bytes
raise DocumentDecodeError.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .rules import (
    MAX_LIST_ITEMS,
    MAX_REPORTED_KEY_LENGTH,
    MAX_REPORTED_UNKNOWN_FIELDS,
    MAX_STRING_LENGTH,
    SCALAR_FIELDS,
    SIMPLE_LIST_FIELDS,
    STRUCTURED_LIST_FIELDS,
)
from .schema import DOCUMENT_FIELDS, default_document, default_item

logger = logging.getLogger(__name__)

_MISSING = object()
_UTF8_BOM = b"\xef\xbb\xbf"
# lone UTF-16 surrogates are valid in JSON text but cannot be encoded as UTF-8
_SURROGATE = re.compile("[\uD800-\uDFFF]")
# JS switches to exponent notation from here on
_EXPONENT_FLOAT = 1e21


class DocumentDecodeError(ValueError):
    """Raised when uploaded bytes cannot be turned into a JSON value."""


def _own(raw: Any, key: str) -> Any:
    # dict's own lookups, so subclass hooks (__missing__, overridden
    # __getitem__) and non-dict mappings are never consulted.
    if isinstance(raw, dict) and dict.__contains__(raw, key):
        return dict.__getitem__(raw, key)
    return _MISSING


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if _EXPONENT_FLOAT <= abs(value) < float("inf"):
            return repr(value)
        if value.is_integer():
            value = int(value)
    try:
        if isinstance(value, int):
            return str(value)
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    except (ValueError, RecursionError):
        return ""


def _warn(
    warnings: List[Dict[str, Any]],
    field: Optional[str],
    issue: str,
    action: str,
    index: Optional[int] = None,
    value: Optional[str] = None,
) -> None:
    warnings.append({
        "field": field,
        "index": index,
        "issue": issue,
        "value": value,
        "action": action,
    })


def _text(
    warnings: List[Dict[str, Any]],
    field: str,
    value: Any,
    index: Optional[int] = None,
) -> str:
    if not isinstance(value, str):
        _warn(warnings, field, "wrong_type", "coerced_to_string", index, _json_type(value))

    text = _to_text(value)
    if _SURROGATE.search(text):
        _warn(warnings, field, "invalid_text", "replaced_surrogates", index)
        text = _SURROGATE.sub("\uFFFD", text)
    if len(text) > MAX_STRING_LENGTH:
        _warn(warnings, field, "too_long", f"truncated_to_{MAX_STRING_LENGTH}", index, str(len(text)))
        text = text[:MAX_STRING_LENGTH]
    return text


def _capped(warnings: List[Dict[str, Any]], field: str, value: Any) -> Optional[list]:
    if not isinstance(value, (list, tuple)):
        _warn(warnings, field, "wrong_type", "replaced_with_empty_list", value=_json_type(value))
        return None

    if len(value) > MAX_LIST_ITEMS:
        _warn(warnings, field, "too_many_items", f"capped_to_{MAX_LIST_ITEMS}", value=str(len(value)))
    return list(value[:MAX_LIST_ITEMS])


def _simple_list(warnings: List[Dict[str, Any]], field: str, value: Any) -> List[str]:
    items = _capped(warnings, field, value)
    if items is None:
        return []
    return [_text(warnings, field, item, i) for i, item in enumerate(items)]


def _structured_list(warnings: List[Dict[str, Any]], field: str, value: Any) -> List[Dict[str, str]]:
    items = _capped(warnings, field, value)
    if items is None:
        return []

    out: List[Dict[str, str]] = []
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            # keep the position so item indexes still line up
            _warn(warnings, field, "item_not_an_object", "replaced_with_default_item", i, _json_type(item))
            out.append(default_item(field))
            continue

        shaped = default_item(field)
        for sub in shaped:
            sub_value = _own(item, sub)
            if sub_value is not _MISSING:
                shaped[sub] = _text(warnings, f"{field}.{sub}", sub_value, i)
        out.append(shaped)
    return out


def normalize_with_report(raw: Any) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Normalize an arbitrary JSON-decoded value into a VTO document.

    Returns (document, warnings). The document always carries every
    canonical field and nothing else; warnings list each anomaly that was
    absorbed (wrong types, oversized values, unknown keys).
    """
    warnings: List[Dict[str, Any]] = []
    doc = default_document()

    if not isinstance(raw, dict):
        _warn(warnings, None, "not_an_object", "defaults_used", value=_json_type(raw))
        logger.debug("input is %s, using default document", _json_type(raw))
        return doc, warnings

    unknown = [key for key in raw if key not in DOCUMENT_FIELDS]
    for key in unknown[:MAX_REPORTED_UNKNOWN_FIELDS]:
        name = _SURROGATE.sub("\uFFFD", _to_text(key)[:MAX_REPORTED_KEY_LENGTH])
        _warn(warnings, name, "unknown_field", "ignored")
    if len(unknown) > MAX_REPORTED_UNKNOWN_FIELDS:
        _warn(
            warnings, None, "unknown_field", "ignored_not_reported",
            value=str(len(unknown) - MAX_REPORTED_UNKNOWN_FIELDS),
        )

    for field in SCALAR_FIELDS:
        value = _own(raw, field)
        if value is not _MISSING:
            doc[field] = _text(warnings, field, value)

    for field in SIMPLE_LIST_FIELDS:
        value = _own(raw, field)
        if value is not _MISSING:
            doc[field] = _simple_list(warnings, field, value)

    for field in STRUCTURED_LIST_FIELDS:
        value = _own(raw, field)
        if value is not _MISSING:
            doc[field] = _structured_list(warnings, field, value)

    if warnings:
        logger.debug("normalized document, %d anomalies absorbed", len(warnings))
    return doc, warnings


def normalize_document(raw: Any) -> Dict[str, Any]:
    return normalize_with_report(raw)[0]


def decode_json_bytes(raw: bytes) -> Tuple[Any, Dict[str, Any]]:
    """
    Decode bytes into a JSON value.

    Rules:
    - UTF-8 with BOM is decoded as utf-8-sig.
    - Plain UTF-8 is tried next.
    - Otherwise fall back to charset-normalizer's best guess and report it.
    """
    detected = None
    decode_fallback = False

    if raw.startswith(_UTF8_BOM):
        decode_used = "utf-8-sig"
        text = raw.decode(decode_used)
    else:
        try:
            decode_used = "utf-8"
            text = raw.decode(decode_used)
        except UnicodeDecodeError:
            match = from_bytes(raw).best()
            if match is None:
                raise DocumentDecodeError("could not detect text encoding")
            detected = match.encoding
            decode_used = detected
            decode_fallback = True
            text = str(match)

    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentDecodeError(
            f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}"
        ) from exc
    except (ValueError, RecursionError) as exc:
        raise DocumentDecodeError(f"invalid JSON: {exc}") from exc

    encoding = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }
    return value, encoding


def _envelope(
    doc: Dict[str, Any],
    warnings: List[Dict[str, Any]],
    normalizations: Dict[str, Any],
) -> Dict[str, Any]:
    normalizations["bounds"] = {
        "max_string_length": MAX_STRING_LENGTH,
        "max_list_items": MAX_LIST_ITEMS,
    }
    return {
        "document": doc,
        "report": {
            "summary": {
                "field_count": len(DOCUMENT_FIELDS),
                "warnings": len(warnings),
                "deterministic": True,
            },
            "normalizations": normalizations,
            "warnings": warnings,
        },
    }


def normalize_payload(raw: Any) -> Dict[str, Any]:
    """Normalize an already-decoded value; returns the API's response envelope."""
    doc, warnings = normalize_with_report(raw)
    return _envelope(doc, warnings, {})


def load_document_bytes(raw: bytes) -> Dict[str, Any]:
    """Decode, parse and normalize uploaded bytes; returns the API's response envelope."""
    value, encoding = decode_json_bytes(raw)
    doc, warnings = normalize_with_report(value)
    return _envelope(doc, warnings, {"encoding": encoding})
