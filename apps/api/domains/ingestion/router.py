"""Ingestion router: file upload and receipt OCR endpoints.

/ingest/file runs the whole pipeline and surfaces pipeline failures as
problem details. /ingest/receipt never fails: OCR trouble comes back as
a 200 with a degraded record carrying an ``error`` annotation.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from apps.api.core.config import settings
from apps.api.core.errors import PayloadTooLargeError
from apps.api.domains.ingestion.schemas import IngestResponse, ReceiptTextRequest, RecordOut
from apps.api.domains.ingestion.service import get_recognizer
from packages.ingestion_engine.dispatcher import dispatch
from packages.ingestion_engine.ocr import TextRecognizer, degraded_record, process_receipt_image
from packages.ingestion_engine.receipt import extract_receipt, file_stem

router = APIRouter(prefix="/ingest", tags=["ingestion"])
logger = structlog.get_logger()


@router.post("/file", response_model=IngestResponse, response_model_exclude_none=True)
async def ingest_file(
    file: UploadFile = File(...),
    password: Optional[str] = Form(None),
    recognizer: TextRecognizer = Depends(get_recognizer),
):
    """Accept a spreadsheet, CSV, PDF or receipt image and normalize it."""
    filename = file.filename or ""
    contents = await file.read()
    if len(contents) > settings.MAX_UPLOAD_BYTES:
        raise PayloadTooLargeError(settings.MAX_UPLOAD_BYTES)

    records = await run_in_threadpool(
        dispatch,
        filename,
        contents,
        recognizer=recognizer,
        password=password,
        logger=logger,
    )

    logger.info("ingest_complete", count=len(records), filename=filename)
    return IngestResponse(
        transactions=[RecordOut.from_record(record) for record in records],
        count=len(records),
    )


@router.post("/receipt", response_model=RecordOut, response_model_exclude_none=True)
async def ingest_receipt(
    image: Optional[UploadFile] = File(None),
    recognizer: TextRecognizer = Depends(get_recognizer),
):
    """OCR a receipt image. Always answers 200."""
    if image is None:
        return RecordOut.from_record(degraded_record("Unknown", "No image file provided"))

    filename = image.filename or ""
    contents = await image.read()
    if len(contents) > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        record = degraded_record(
            "Receipt from " + file_stem(filename), f"File too large (max {limit_mb}MB)"
        )
        return RecordOut.from_record(record)

    record = await run_in_threadpool(
        process_receipt_image, contents, filename, recognizer, logger
    )
    return RecordOut.from_record(record)


@router.post("/receipt/text", response_model=RecordOut, response_model_exclude_none=True)
async def ingest_receipt_text(request: ReceiptTextRequest):
    """Extract a record from text that was already recognized elsewhere."""
    record = extract_receipt(request.text, request.filename)
    logger.info("receipt_text_extracted", vendor=record.vendor, amount=record.amount)
    return RecordOut.from_record(record)
