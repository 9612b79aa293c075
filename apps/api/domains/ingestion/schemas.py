"""Pydantic schemas for the ingestion domain."""

from typing import Optional

from pydantic import BaseModel, Field

from packages.ingestion_engine.models import UNCATEGORIZED, CanonicalRecord


class RecordOut(BaseModel):
    """A canonical record ready for display or insert."""

    vendor: str
    amount: float
    category: str = UNCATEGORIZED
    date: str = Field(..., description="YYYY-MM-DD")
    raw_text: Optional[str] = Field(
        default=None, description="First 200 characters of OCR text (receipts only)"
    )
    error: Optional[str] = Field(
        default=None, description="Why a receipt record is degraded, if it is"
    )

    @classmethod
    def from_record(cls, record: CanonicalRecord) -> "RecordOut":
        return cls(**record.to_dict())


class IngestResponse(BaseModel):
    """Response from file ingestion."""

    transactions: list[RecordOut]
    count: int


class ReceiptTextRequest(BaseModel):
    """Already-recognized receipt text."""

    text: str
    filename: str = ""
