"""Pick an ingestion strategy from the file extension."""

from pathlib import PurePath
from typing import List, Optional

import structlog

from .dates import today_iso
from .errors import UnsupportedFormat
from .extractor import extract_records
from .models import CanonicalRecord
from .ocr import OcrSpaceClient, TextRecognizer, process_receipt_image
from .readers import read_csv, read_spreadsheet
from .receipt import file_stem

SPREADSHEET_EXTENSIONS = (".xlsx", ".xls")
CSV_EXTENSIONS = (".csv",)
STATEMENT_EXTENSIONS = (".pdf",)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")

ACCEPTED_EXTENSIONS = (
    SPREADSHEET_EXTENSIONS + CSV_EXTENSIONS + STATEMENT_EXTENSIONS + IMAGE_EXTENSIONS
)


def file_extension(filename: str) -> str:
    """Lower-cased final suffix including the dot, or ``""``."""
    name = PurePath(filename or "").name
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[1].lower()


def statement_placeholder(filename: str) -> CanonicalRecord:
    """Inert stand-in for a PDF statement; PDF parsing is not attempted."""
    return CanonicalRecord(
        vendor="Statement from " + file_stem(filename),
        amount=0.0,
        category="Statement",
        date=today_iso(),
    )


def dispatch(
    filename: str,
    content: bytes,
    *,
    recognizer: Optional[TextRecognizer] = None,
    password: Optional[str] = None,
    logger: Optional[structlog.stdlib.BoundLogger] = None,
) -> List[CanonicalRecord]:
    """Ingest one uploaded file.

    Args:
        filename: Original file name; its extension (any case) picks the path.
        content: Raw file bytes.
        recognizer: OCR collaborator for images. A default OCR.space client
            is created (and closed) when omitted.
        password: Workbook password for encrypted spreadsheets.
        logger: structlog logger to report through.

    Returns:
        Canonical records. Tabular files yield zero or more; PDFs and
        images yield exactly one.

    Raises:
        UnsupportedFormat: extension not in ACCEPTED_EXTENSIONS.
        EmptyDataset: spreadsheet/CSV has no rows.
        DecodeFailure: spreadsheet/CSV could not be decoded.
    """
    extension = file_extension(filename)
    log = (logger or structlog.get_logger(__name__)).bind(
        filename=filename, extension=extension
    )
    log.info("dispatch_started", size=len(content))

    if extension in SPREADSHEET_EXTENSIONS:
        rows = read_spreadsheet(content, password=password, source="Excel file")
    elif extension in CSV_EXTENSIONS:
        rows = read_csv(content, source="CSV file")
    elif extension in STATEMENT_EXTENSIONS:
        return [statement_placeholder(filename)]
    elif extension in IMAGE_EXTENSIONS:
        if recognizer is not None:
            return [process_receipt_image(content, filename, recognizer, logger=log)]
        client = OcrSpaceClient(logger=log)
        try:
            return [process_receipt_image(content, filename, client, logger=log)]
        finally:
            client.close()
    else:
        log.warning("unsupported_format")
        raise UnsupportedFormat(extension, ACCEPTED_EXTENSIONS)

    log.info("tabular_rows_decoded", rows=len(rows))
    return extract_records(rows, logger=log)
