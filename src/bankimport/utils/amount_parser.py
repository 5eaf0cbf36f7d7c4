"""Amount parsing utilities."""

import math
import re
from typing import Any

# Currency symbols, thousands separators, whitespace and the won unit suffix.
_NOISE = re.compile(r"[₩$,\s원]")
_LEADING_NUMBER = re.compile(r"^[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")


def parse_amount(value: Any) -> float:
    """Parse a bank export amount cell into a non-negative float.

    Handles:
    - numeric cells (spreadsheets)
    - "150,000", "₩150,000", "150,000원", " 1 500 "
    - "-3000" (sign is dropped; direction comes from the column)

    Unparsable or empty input yields 0.0; this never raises.

    Args:
        value: Raw cell value

    Returns:
        Absolute amount
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
        return 0.0 if math.isnan(number) or math.isinf(number) else abs(number)

    cleaned = _NOISE.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return 0.0

    number = float(match.group(0))
    return 0.0 if math.isinf(number) else abs(number)
