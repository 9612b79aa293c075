"""Amount string normalization."""

import math
import re
from typing import Union

# Currency symbols, thousands separators and whitespace
_NOISE_RE = re.compile(r"[$€£¥,\s]")
# Leading numeric prefix; trailing junk such as "USD" is ignored
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def normalize_amount(raw: Union[str, int, float, None]) -> float:
    """Turn a raw amount into a non-negative float.

    "$1,234.56" -> 1234.56, "(12.00)" -> 12.0. Anything unparseable
    becomes 0.0, which the row filter treats as "no transaction". The sign
    is discarded: imports only record spend magnitudes.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        # Accounting notation: (12.00) means -12.00
        cleaned = _NOISE_RE.sub("", str(raw)).replace("(", "-").replace(")", "-")
        match = _NUMBER_RE.match(cleaned)
        if not match:
            return 0.0
        value = float(match.group(0))

    if not math.isfinite(value):
        return 0.0
    return abs(value)
