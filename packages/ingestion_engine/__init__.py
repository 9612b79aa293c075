"""
Pigmint Ingestion Engine

Normalizes spreadsheets, CSV exports and OCR'd receipts into canonical
{vendor, amount, category, date} records.
"""

__version__ = "0.1.0"

from .amount import normalize_amount
from .dates import normalize_date
from .dispatcher import ACCEPTED_EXTENSIONS, dispatch
from .errors import DecodeFailure, EmptyDataset, IngestionError, UnsupportedFormat
from .extractor import extract_record, extract_records
from .field_resolver import resolve_field
from .models import CanonicalRecord, ReceiptRecord
from .ocr import OcrOutcome, OcrSpaceClient, TextRecognizer, process_receipt_image
from .receipt import extract_receipt

__all__ = [
    "ACCEPTED_EXTENSIONS",
    "CanonicalRecord",
    "DecodeFailure",
    "EmptyDataset",
    "IngestionError",
    "OcrOutcome",
    "OcrSpaceClient",
    "ReceiptRecord",
    "TextRecognizer",
    "UnsupportedFormat",
    "dispatch",
    "extract_receipt",
    "extract_record",
    "extract_records",
    "normalize_amount",
    "normalize_date",
    "process_receipt_image",
    "resolve_field",
]
