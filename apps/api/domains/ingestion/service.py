"""Ingestion service: OCR client lifecycle.

The OCR.space client holds an httpx connection pool, so it is built once
per process from settings and shared by every request.
"""

import threading
from typing import Optional

import structlog

from apps.api.core.config import settings
from packages.ingestion_engine.ocr import OcrSpaceClient, TextRecognizer

logger = structlog.get_logger()

# Module-level singleton (thread-safe init)
_recognizer: Optional[OcrSpaceClient] = None
_recognizer_lock = threading.Lock()


def get_recognizer() -> TextRecognizer:
    """Get or create the OCR client singleton."""
    global _recognizer
    if _recognizer is None:
        with _recognizer_lock:
            if _recognizer is None:  # Double-checked locking
                _recognizer = OcrSpaceClient(
                    api_key=settings.OCR_SPACE_API_KEY,
                    endpoint=settings.OCR_SPACE_URL,
                    engine=settings.OCR_ENGINE,
                    timeout=settings.OCR_TIMEOUT_SECONDS,
                )
                logger.info("ocr_client_initialized", endpoint=settings.OCR_SPACE_URL)
    return _recognizer


def close_recognizer() -> None:
    """Release the OCR client's connection pool (app shutdown)."""
    global _recognizer
    with _recognizer_lock:
        if _recognizer is not None:
            _recognizer.close()
            _recognizer = None
