import math
from typing import Optional

DECIMAL_PRECISION = 3


def format_decimal(value: float) -> str:
    """
    Format a number for display.
    Up to DECIMAL_PRECISION decimals, trailing zeros and point stripped
    (2.0 -> "2", 2.5 -> "2.5", 1/3 -> "0.333").
    Huge or non-finite values are printed raw.
    """
    if math.isinf(value) or math.isnan(value) or abs(value) >= 1e10:
        return repr(value)

    s = f"{value:.{DECIMAL_PRECISION}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s


def blank_to_none(text: Optional[str]) -> Optional[str]:
    """Trim text; empty or missing -> None."""
    if text is None:
        return None
    s = text.strip()
    return s or None
