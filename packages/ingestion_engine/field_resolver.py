"""Fuzzy column lookup for tabular sources.

Uploaded spreadsheets never agree on header names, so each canonical
field carries an ordered list of synonyms. A column matches a synonym
when either one contains the other (case-insensitive), which covers both
verbose headers ("Transaction Amount") and abbreviated ones ("desc").
Synonym order is the only tie-break.
"""

import math
from typing import Sequence

from .models import CellValue, RawRow

VENDOR_FIELDS = ("vendor", "merchant", "description", "name", "payee", "store", "shop")
AMOUNT_FIELDS = ("amount", "total", "price", "cost", "value", "sum", "charge", "payment")
CATEGORY_FIELDS = ("category", "type", "class", "group", "tag")
DATE_FIELDS = (
    "date",
    "transaction_date",
    "purchase_date",
    "posted_date",
    "time",
    "timestamp",
)


def _labels_match(label: str, candidate: str) -> bool:
    label = label.lower()
    candidate = candidate.lower()
    return label == candidate or candidate in label or label in candidate


def _is_usable(value: CellValue) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return value != ""


def stringify_cell(value: CellValue) -> str:
    """Render a cell as text; integral floats lose their ``.0``."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def resolve_raw_field(row: RawRow, candidates: Sequence[str]) -> CellValue:
    """Return the first usable cell matching ``candidates``, untouched.

    Returns None when nothing matches.
    """
    for candidate in candidates:
        for label, value in row.items():
            if _labels_match(str(label), candidate) and _is_usable(value):
                return value
    return None


def resolve_field(row: RawRow, candidates: Sequence[str]) -> str:
    """Return the first usable cell matching ``candidates`` as a string.

    An empty string means no column matched; it is never an error.
    """
    return stringify_cell(resolve_raw_field(row, candidates))
