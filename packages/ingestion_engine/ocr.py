"""Receipt image path: OCR.space client and degraded-record policy.

The text-recognition service is an external collaborator. Whatever it
does (unreachable, non-2xx, processing error, no text) the image path
still returns a displayable record, annotated with ``error``, instead of
raising. Retries and backoff belong to the caller.
"""

import base64
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from .dates import today_iso
from .models import UNCATEGORIZED, ReceiptRecord
from .receipt import extract_receipt, file_stem

DEFAULT_ENDPOINT = "https://api.ocr.space/parse/image"
# OCR.space public demo key
DEFAULT_API_KEY = "helloworld"


@dataclass(frozen=True)
class OcrOutcome:
    """Either recognized ``text`` or a human-readable ``error``."""

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TextRecognizer(ABC):
    """Anything that turns image bytes into raw text."""

    @abstractmethod
    def recognize(self, content: bytes, filename: str = "") -> OcrOutcome:
        """Recognize text in ``content``.

        Service-level failures come back as ``OcrOutcome(error=...)``;
        transport failures raise ``httpx.HTTPError`` or ``ValueError``.
        """
        pass


def _join_error_message(message: Any) -> str:
    # OCR.space sends ErrorMessage as a string or a list of strings
    if isinstance(message, (list, tuple)):
        return "; ".join(str(part) for part in message if part)
    return str(message) if message else ""


class OcrSpaceClient(TextRecognizer):
    """OCR.space ``/parse/image`` client.

    Sends the image base64-encoded with English language, orientation
    detection and scaling turned on.
    """

    def __init__(
        self,
        api_key: str = DEFAULT_API_KEY,
        endpoint: str = DEFAULT_ENDPOINT,
        engine: str = "2",
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint
        self.engine = engine
        self._http = http_client or httpx.Client(timeout=timeout)
        self._log = logger or structlog.get_logger(__name__)

    def _form_fields(self, content: bytes, filename: str) -> dict:
        mime = mimetypes.guess_type(filename or "")[0] or "image/jpeg"
        encoded = base64.b64encode(content).decode("ascii")
        return {
            "apikey": self.api_key,
            "base64Image": f"data:{mime};base64,{encoded}",
            "language": "eng",
            "isOverlayRequired": "false",
            "detectOrientation": "true",
            "scale": "true",
            "OCREngine": self.engine,
        }

    def recognize(self, content: bytes, filename: str = "") -> OcrOutcome:
        response = self._http.post(self.endpoint, data=self._form_fields(content, filename))
        self._log.info("ocr_response", status=response.status_code, filename=filename)

        if not response.is_success:
            self._log.error(
                "ocr_service_error",
                status=response.status_code,
                reason=response.reason_phrase,
            )
            return OcrOutcome(error="OCR service unavailable")

        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected OCR response shape")

        if payload.get("IsErroredOnProcessing"):
            message = _join_error_message(payload.get("ErrorMessage"))
            self._log.error("ocr_processing_error", message=message)
            return OcrOutcome(error=message or "OCR processing failed")

        results = payload.get("ParsedResults") or []
        if not isinstance(results, list):
            raise ValueError("Unexpected OCR response shape")
        if not results:
            self._log.warning("ocr_no_parsed_results")
            return OcrOutcome(error="Could not extract text from image")

        first = results[0]
        if not isinstance(first, dict):
            raise ValueError("Unexpected OCR response shape")
        text = first.get("ParsedText") or ""
        if not isinstance(text, str):
            raise ValueError("Unexpected OCR response shape")
        return OcrOutcome(text=text)

    def close(self) -> None:
        self._http.close()


def degraded_record(vendor: str, error: str) -> ReceiptRecord:
    """Placeholder record for a receipt whose text could not be read."""
    return ReceiptRecord(
        vendor=vendor,
        amount=0.0,
        category=UNCATEGORIZED,
        date=today_iso(),
        error=error,
    )


def process_receipt_image(
    content: bytes,
    filename: str,
    recognizer: TextRecognizer,
    logger: Optional[structlog.stdlib.BoundLogger] = None,
) -> ReceiptRecord:
    """Run OCR on a receipt image and extract a record. Never raises for
    OCR failures."""
    log = logger or structlog.get_logger(__name__)

    if not content:
        return degraded_record("Unknown", "No image file provided")

    log.info("receipt_image_received", filename=filename, size=len(content))

    try:
        outcome = recognizer.recognize(content, filename)
    except (httpx.HTTPError, ValueError) as e:
        log.error("ocr_request_failed", error=str(e), filename=filename)
        return degraded_record("Unknown", str(e) or "Failed to process image")

    if not outcome.ok:
        return degraded_record("Receipt from " + file_stem(filename), outcome.error)

    record = extract_receipt(outcome.text or "", filename)
    log.info(
        "receipt_extracted",
        vendor=record.vendor,
        amount=record.amount,
        date=record.date,
    )
    return record
