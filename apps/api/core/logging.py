"""Structured logging with structlog.

JSON lines in production, colorized console output in development. The
ingestion engine logs through structlog too, so pipeline events
(dispatch_started, tabular_rows_extracted, receipt_extracted, ...) land
in the same stream, each stamped with the emitting service's name.

Usage:
    import structlog
    logger = structlog.get_logger()
    logger.info("event_name", key="value", count=42)
"""

import logging
import sys

import structlog

SERVICE_NAME = "ingestion"


def _service_stamper(service: str):
    """Processor adding ``service`` unless the event already names one."""

    def stamp(logger, method_name, event_dict):
        event_dict.setdefault("service", service)
        return event_dict

    return stamp


def setup_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    service: str = SERVICE_NAME,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Python log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: If True, use JSON renderer (production). If False,
                     use colorized console renderer (development).
        service: Name stamped on every event, so ingestion lines can be
                 told apart in a shared log stream.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _service_stamper(service),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
