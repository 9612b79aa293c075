"""Tabular row -> canonical record."""

from typing import Iterable, List, Optional

import structlog

from .amount import normalize_amount
from .dates import normalize_date
from .field_resolver import (
    AMOUNT_FIELDS,
    CATEGORY_FIELDS,
    DATE_FIELDS,
    VENDOR_FIELDS,
    resolve_field,
    resolve_raw_field,
)
from .models import UNCATEGORIZED, CanonicalRecord, RawRow


def extract_record(row: RawRow) -> Optional[CanonicalRecord]:
    """Build a record from one decoded row.

    Returns None when the row has no vendor or no positive amount; sparse
    and summary rows are expected in arbitrary uploads and are not errors.
    """
    vendor = resolve_field(row, VENDOR_FIELDS).strip()
    amount = normalize_amount(resolve_field(row, AMOUNT_FIELDS))

    if not vendor or vendor == "undefined" or amount <= 0:
        return None

    category = resolve_field(row, CATEGORY_FIELDS).strip() or UNCATEGORIZED
    # Raw cell: a numeric serial or datetime must reach the normalizer as-is
    date = normalize_date(resolve_raw_field(row, DATE_FIELDS))

    return CanonicalRecord(vendor=vendor, amount=amount, category=category, date=date)


def extract_records(
    rows: Iterable[RawRow], logger: Optional[structlog.stdlib.BoundLogger] = None
) -> List[CanonicalRecord]:
    """Map every row through :func:`extract_record`, dropping the rejects."""
    log = logger or structlog.get_logger(__name__)

    records = []
    dropped = 0
    for index, row in enumerate(rows):
        record = extract_record(row)
        if record is None:
            dropped += 1
            log.debug("tabular_row_dropped", row=index)
            continue
        records.append(record)

    log.info("tabular_rows_extracted", kept=len(records), dropped=dropped)
    return records
