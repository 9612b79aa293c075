"""Failures that abort a single ingestion call.

Field-level problems (unmatched column, bad amount, bad date) are never
raised; they degrade to defaults instead. Only the conditions below stop
an upload.
"""

from typing import Iterable, Optional

EXPECTED_COLUMNS = "vendor (or merchant/description), amount, date, and optionally category"


class IngestionError(Exception):
    """Base class for pipeline failures."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class UnsupportedFormat(IngestionError):
    """File extension has no ingestion strategy."""

    def __init__(self, extension: str, accepted: Iterable[str]):
        self.extension = extension
        self.accepted = tuple(accepted)
        shown = extension or "(none)"
        super().__init__(
            f"Unsupported file type {shown}. "
            f"Accepted: {', '.join(self.accepted)}"
        )


class EmptyDataset(IngestionError):
    """Tabular source decoded to zero rows."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"No data found in {source}. Expected a header row with columns "
            f"for {EXPECTED_COLUMNS}."
        )


class DecodeFailure(IngestionError):
    """Spreadsheet/CSV decoder itself failed."""

    def __init__(self, source: str, cause: Optional[BaseException] = None):
        self.source = source
        self.cause = cause
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to parse {source}{reason}")
