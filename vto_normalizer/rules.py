"""
Deterministic normalization rules.

Every bound and table the normalizer and the export pipeline rely on lives
here so the limits are explicit and enforceable.
"""

import os

MAX_STRING_LENGTH = 10000
MAX_LIST_ITEMS = 100
MAX_FILENAME_LENGTH = 50
DEFAULT_FILENAME = "export"

# Unknown keys are echoed into the report, never their values.
MAX_REPORTED_KEY_LENGTH = 100

# At most this many unknown keys get their own report item.
MAX_REPORTED_UNKNOWN_FIELDS = 20


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default."""

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


# Request body limit for every endpoint that takes a document; read once at import time.
MAX_UPLOAD_BYTES = _env_int("VTO_MAX_UPLOAD_BYTES", 1024 * 1024)

SCALAR_FIELDS = (
    "companyName",
    "vtoDate",
    "quarter",
    "theBar",
    "purpose",
    "niche",
    "tenYearDate",
    "tenYearTarget",
    "threeYearDate",
    "threeYearRevenue",
    "threeYearProfit",
    "provenProcess",
    "guarantee",
    "oneYearDate",
    "oneYearRevenue",
    "oneYearProfit",
    "oneYearTheme",
    "rocksDate",
    "rocksRevenue",
    "rocksProfit",
    "rocksTheme",
)

DATE_FIELDS = frozenset({
    "vtoDate",
    "tenYearDate",
    "threeYearDate",
    "oneYearDate",
    "rocksDate",
})

SIMPLE_LIST_FIELDS = (
    "coreValues",
    "threeYearBullets",
    "targetMarket",
    "threeUniques",
    "oneYearGoals",
)

# list field -> sub-fields of each item
STRUCTURED_LIST_FIELDS = {
    "rocks": ("text", "owner"),
    "issues": ("text", "status"),
}

# Code points the PDF font cannot render, mapped to ASCII.
ASCII_REPLACEMENTS = {
    "\u2018": "'",
    "\u2019": "'",
    "\u201C": '"',
    "\u201D": '"',
    "\u2013": "-",
    "\u2014": "-",
    "\u2026": "...",
    "\u00A0": " ",
    "\u00AE": "(R)",
    "\u2122": "(TM)",
    "\u00A9": "(c)",
    "\u00BD": "1/2",
    "\u00BC": "1/4",
    "\u00BE": "3/4",
    "\u2032": "'",  # prime (feet)
    "\u2033": '"',  # double prime (inches)
    "\u00B0": "deg",
    "\u00D7": "x",
    "\u2212": "-",
}

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
