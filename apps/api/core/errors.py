"""RFC 7807 Problem Details error handling.

Every error leaves the API in the same JSON shape:

    {
        "type": "about:blank",
        "title": "Unsupported Media Type",
        "status": 415,
        "detail": "Unsupported file type .txt. Accepted: .xlsx, .xls, ...",
        "instance": "/api/v1/ingest/file"
    }

Ingestion pipeline failures (UnsupportedFormat, EmptyDataset,
DecodeFailure) are translated here, so the pipeline itself stays free of
HTTP concerns.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from packages.ingestion_engine.errors import (
    DecodeFailure,
    EmptyDataset,
    IngestionError,
    UnsupportedFormat,
)

logger = structlog.get_logger()


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str, status_code: int = 500, error_type: str = "about:blank"):
        self.detail = detail
        self.status_code = status_code
        self.error_type = error_type
        super().__init__(detail)


class PayloadTooLargeError(AppError):
    """Upload exceeds the configured size limit."""

    def __init__(self, limit_bytes: int):
        super().__init__(
            detail=f"File too large (max {limit_bytes // (1024 * 1024)}MB)",
            status_code=413,
        )
        self.limit_bytes = limit_bytes


def _build_problem_detail(
    status: int,
    title: str,
    detail: str,
    error_type: str = "about:blank",
    instance: str = "",
    request_id: str = "",
) -> dict:
    """Build RFC 7807 Problem Details response body."""
    body = {
        "type": error_type,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if request_id:
        body["request_id"] = request_id
    return body


# HTTP status code to title mapping
_STATUS_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    413: "Payload Too Large",
    415: "Unsupported Media Type",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}

# Pipeline failure -> HTTP status
_INGESTION_STATUS = {
    UnsupportedFormat: 415,
    EmptyDataset: 422,
    DecodeFailure: 400,
}


def ingestion_status(exc: IngestionError) -> int:
    for error_class, status in _INGESTION_STATUS.items():
        if isinstance(exc, error_class):
            return status
    return 400


def _problem_response(request: Request, status: int, detail: str, error_type: str = "about:blank") -> JSONResponse:
    body = _build_problem_detail(
        status=status,
        title=_STATUS_TITLES.get(status, "Error"),
        detail=detail,
        error_type=error_type,
        instance=str(request.url.path),
        request_id=getattr(request.state, "request_id", ""),
    )
    return JSONResponse(status_code=status, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _problem_response(request, exc.status_code, exc.detail, exc.error_type)

    @app.exception_handler(IngestionError)
    async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
        status = ingestion_status(exc)
        logger.warning(
            "ingestion_rejected",
            error_class=type(exc).__name__,
            detail=exc.detail,
            status=status,
        )
        return _problem_response(request, status, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return _problem_response(request, exc.status_code, detail)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=str(request.url.path))
        return _problem_response(request, 500, "An unexpected error occurred")
