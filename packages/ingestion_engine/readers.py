"""Spreadsheet and CSV decoding into raw rows.

Both readers return plain dicts keyed by the source's own column labels;
interpretation of those labels is left to the field resolver.
"""

import io
import re
from typing import List, Optional

import msoffcrypto
import pandas as pd

from .errors import DecodeFailure, EmptyDataset
from .models import CellValue, RawRow

# OLE2 Compound Document magic bytes: legacy .xls or an encrypted .xlsx
_OLE2_MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"

# pandas placeholder for a blank header cell
_BLANK_HEADER_RE = re.compile(r"^Unnamed: \d+")

_CSV_ENCODINGS = ("utf-8-sig", "cp1252")


def _is_ole2(content: bytes) -> bool:
    return content[:8] == _OLE2_MAGIC


def _open_workbook(content: bytes, password: Optional[str], source: str) -> io.BytesIO:
    """Return a readable workbook stream, decrypting it when needed."""
    if not _is_ole2(content):
        return io.BytesIO(content)

    try:
        office_file = msoffcrypto.OfficeFile(io.BytesIO(content))
        encrypted = office_file.is_encrypted()
    except Exception as e:
        raise DecodeFailure(source, e) from e

    if not encrypted:
        # Plain legacy .xls
        return io.BytesIO(content)

    if not password:
        raise DecodeFailure(source, ValueError("Password required"))

    decrypted = io.BytesIO()
    try:
        office_file.load_key(password=password)
        office_file.decrypt(decrypted)
    except Exception as e:
        raise DecodeFailure(source, ValueError("Invalid password")) from e

    decrypted.seek(0)
    return decrypted


def _clean_cell(value) -> CellValue:
    if value is None or isinstance(value, str):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item"):
        # numpy scalar
        return value.item()
    return value


def _frame_to_rows(df: pd.DataFrame, source: str) -> List[RawRow]:
    df = df.dropna(how="all")
    if df.empty:
        raise EmptyDataset(source)

    labels = [str(column) for column in df.columns]
    keep = [i for i, label in enumerate(labels) if not _BLANK_HEADER_RE.match(label)]

    return [
        {labels[i]: _clean_cell(values[i]) for i in keep}
        for values in df.itertuples(index=False, name=None)
    ]


def read_spreadsheet(
    content: bytes, password: Optional[str] = None, source: str = "spreadsheet"
) -> List[RawRow]:
    """Decode the first sheet of an .xlsx/.xls workbook.

    Header row = column labels. Date-formatted cells arrive as datetimes,
    everything else as the workbook stores it.
    """
    workbook = _open_workbook(content, password, source)
    try:
        df = pd.read_excel(workbook, sheet_name=0, dtype=object)
    except Exception as e:
        raise DecodeFailure(source, e) from e
    return _frame_to_rows(df, source)


def _decode_text(content: bytes) -> str:
    for encoding in _CSV_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 maps every byte, so this cannot fail
    return content.decode("latin-1")


def read_csv(content: bytes, source: str = "CSV file") -> List[RawRow]:
    """Decode CSV bytes; the first row holds the column labels.

    Every cell is kept as text and empty cells stay empty strings.
    """
    text = _decode_text(content)
    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        raise EmptyDataset(source)
    except (pd.errors.ParserError, ValueError) as e:
        raise DecodeFailure(source, e) from e
    return _frame_to_rows(df, source)
