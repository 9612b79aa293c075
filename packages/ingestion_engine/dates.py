"""Date normalization to ``YYYY-MM-DD``.

Spreadsheet serials, ISO strings, US-style month-first strings and
whatever pandas can make sense of are all accepted. Nothing here raises:
an unusable date falls back to today (UTC) so one bad cell never aborts
an otherwise valid row.
"""

import numbers
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

import pandas as pd

MIN_YEAR = 1900
MAX_YEAR = 2100

# Valid spreadsheet serial range: 1900-01-01 .. 9999-12-31
MIN_SERIAL = 1
MAX_SERIAL = 2958465

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_US_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_US_DASH_RE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")


def today_iso() -> str:
    """Today's date in UTC as ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).date().isoformat()


def format_ymd(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def _in_range(year: int, month: int, day: int) -> bool:
    # Month length is deliberately not checked: 2024-02-31 passes.
    return MIN_YEAR <= year <= MAX_YEAR and 1 <= month <= 12 and 1 <= day <= 31


def serial_to_ymd(serial: float) -> Tuple[int, int, int]:
    """Convert a 1900-system spreadsheet serial to (year, month, day).

    Serial 1 is 1900-01-01. Serial 60 is the phantom 1900-02-29 that
    spreadsheet formats inherited from Lotus 1-2-3, so every later serial
    is offset by one day. The time-of-day fraction is dropped.
    """
    days = int(serial)
    if days == 60:
        return 1900, 2, 29
    epoch = date(1899, 12, 31) if days < 60 else date(1899, 12, 30)
    converted = epoch + timedelta(days=days)
    return converted.year, converted.month, converted.day


def _from_serial(serial: float) -> Optional[str]:
    if not MIN_SERIAL <= serial <= MAX_SERIAL:
        return None
    year, month, day = serial_to_ymd(serial)
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    return format_ymd(year, month, day)


def _from_datetime(value: date) -> Optional[str]:
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    if not MIN_YEAR <= value.year <= MAX_YEAR:
        return None
    return format_ymd(value.year, value.month, value.day)


def _from_fixed_patterns(text: str) -> Optional[str]:
    match = _ISO_RE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        if _in_range(year, month, day):
            return text

    for pattern in (_US_SLASH_RE, _US_DASH_RE):
        match = pattern.match(text)
        if match:
            month, day, year = (int(part) for part in match.groups())
            if _in_range(year, month, day):
                return format_ymd(year, month, day)

    return None


def _from_free_text(text: str) -> Optional[str]:
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return _from_datetime(parsed.to_pydatetime())


def normalize_date(raw) -> str:
    """Normalize ``raw`` to ``YYYY-MM-DD``; today's date when unusable.

    Accepts numeric spreadsheet serials, ``date``/``datetime`` values from
    spreadsheet decoders, and strings (``YYYY-MM-DD``, ``MM/DD/YYYY``,
    ``MM-DD-YYYY``, then any format pandas can parse). Years must fall in
    [1900, 2100].
    """
    if raw is None or isinstance(raw, bool):
        return today_iso()

    if not isinstance(raw, str) and pd.isna(raw):
        return today_iso()

    if isinstance(raw, date):
        return _from_datetime(raw) or today_iso()

    if isinstance(raw, numbers.Real):
        return _from_serial(float(raw)) or today_iso()

    text = str(raw).strip()
    if not text:
        return today_iso()

    return _from_fixed_patterns(text) or _from_free_text(text) or today_iso()
