"""Canonical record shapes shared by every ingestion path."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union

UNCATEGORIZED = "Uncategorized"

# A decoded cell. None is the empty cell; numbers stay numbers until used.
CellValue = Union[str, int, float, datetime, date, None]
RawRow = Mapping[str, CellValue]


@dataclass(frozen=True)
class CanonicalRecord:
    """Normalized transaction: the only shape ingestion ever emits."""

    vendor: str
    amount: float
    date: str  # YYYY-MM-DD
    category: str = UNCATEGORIZED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendor": self.vendor,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
        }


@dataclass(frozen=True)
class ReceiptRecord(CanonicalRecord):
    """Record recovered from OCR text.

    ``raw_text`` keeps the head of the recognized text for auditing and
    ``error`` explains why the record is degraded, if it is.
    """

    raw_text: Optional[str] = None
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.raw_text is not None:
            data["raw_text"] = self.raw_text
        if self.error is not None:
            data["error"] = self.error
        return data
