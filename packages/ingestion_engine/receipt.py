"""Heuristic vendor/amount/date recovery from OCR receipt text.

OCR output has no columns, only lines, so every field is a guess based
on line order and keywords:

* vendor: the first early line that is not just numbers/punctuation
* amount: amounts on "total"-like lines beat amounts anywhere else
* date:   the first date-shaped token that is a real 2000-2100 date

Each heuristic is a pure function over the line list so it can be pinned
by example tests.
"""

import re
from datetime import date
from pathlib import PurePath
from typing import List, Optional, Sequence

from .dates import today_iso
from .models import UNCATEGORIZED, ReceiptRecord

VENDOR_SCAN_LINES = 5
VENDOR_MAX_LENGTH = 50
RAW_TEXT_PREVIEW = 200
TOTAL_KEYWORDS = ("total", "amount", "balance", "pay", "due")

MIN_RECEIPT_YEAR = 2000
MAX_RECEIPT_YEAR = 2100

# Lines made only of digits, spaces and money punctuation
_NUMERIC_LINE_RE = re.compile(r"^[\d\s$.,-]+$")

# Optional $, then either a comma-grouped amount (1,234.56) or digits with
# a '.' or ',' decimal separator and exactly two fraction digits
_AMOUNT_RE = re.compile(r"\$?\s*(\d{1,3}(?:,\d{3})+\.\d{2}|\d+[.,]\d{2})\b")

_DATE_RE = re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}[/-]\d{1,2}[/-]\d{1,2}")
_DATE_SEP_RE = re.compile(r"[/-]")


def file_stem(filename: str) -> str:
    """Filename up to its first dot: ``"IMG_01.scan.jpg"`` -> ``"IMG_01"``."""
    return PurePath(filename or "").name.split(".")[0]


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def pick_vendor(lines: Sequence[str], filename: str = "") -> str:
    for line in lines[:VENDOR_SCAN_LINES]:
        if len(line) > 3 and not _NUMERIC_LINE_RE.match(line):
            return line[:VENDOR_MAX_LENGTH]
    if filename:
        return "Receipt from " + file_stem(filename)
    return "Unknown Merchant"


def is_total_line(line: str) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in TOTAL_KEYWORDS)


def _to_float(token: str) -> float:
    if "." in token:
        # 1,234.56: commas are grouping
        return float(token.replace(",", ""))
    # 4,20: comma is the decimal separator
    return float(token.replace(",", "."))


def find_amounts(line: str) -> List[float]:
    """All positive currency amounts on ``line``, left to right."""
    amounts = []
    for match in _AMOUNT_RE.finditer(line):
        value = _to_float(match.group(1))
        if value > 0:
            amounts.append(value)
    return amounts


def pick_amount(lines: Sequence[str]) -> float:
    """Pick the payable amount; 0.0 when no amount is found.

    Total-like amounts are pushed to the front of the candidate list and
    the rest appended, so the last total-like line wins, and without any
    total line the first amount on the receipt wins.
    """
    candidates: List[float] = []
    for line in lines:
        found = find_amounts(line)
        if not found:
            continue
        if is_total_line(line):
            for value in found:
                candidates.insert(0, value)
        else:
            candidates.extend(found)
    return candidates[0] if candidates else 0.0


def parse_receipt_date(token: str) -> Optional[str]:
    """Parse a date token found on a receipt.

    ``Y-M-D``/``Y/M/D`` when the first part has four digits, otherwise
    month-first ``M/D/Y``. Two-digit years mean 20YY.
    """
    parts = _DATE_SEP_RE.split(token)
    if len(parts[0]) == 4:
        year, month, day = (int(part) for part in parts)
    else:
        month, day, year = (int(part) for part in parts)
        if len(parts[2]) == 2:
            year += 2000

    if not MIN_RECEIPT_YEAR <= year <= MAX_RECEIPT_YEAR:
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def pick_date(lines: Sequence[str]) -> str:
    """First parseable date on the receipt; today when there is none."""
    for line in lines:
        match = _DATE_RE.search(line)
        if not match:
            continue
        parsed = parse_receipt_date(match.group(0))
        if parsed:
            return parsed
    return today_iso()


def extract_receipt(text: str, filename: str = "") -> ReceiptRecord:
    """Best-effort record from OCR text. Always succeeds.

    Category is never inferred from free text.
    """
    lines = split_lines(text)
    return ReceiptRecord(
        vendor=pick_vendor(lines, filename),
        amount=pick_amount(lines),
        category=UNCATEGORIZED,
        date=pick_date(lines),
        raw_text=(text or "")[:RAW_TEXT_PREVIEW],
    )
