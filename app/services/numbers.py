from __future__ import annotations

import math
import re
from decimal import Decimal

# Longest numeric prefix, the way browsers read "12abc" or "3.5kg".
_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")
_EXPONENT_PADDING_RE = re.compile(r"e([+-])0*(\d)")


def parse_leading_number(text: str) -> float | None:
    """Parse the numeric prefix of ``text``; ``None`` when there is none.

    ``"12abc"`` -> 12.0, ``"0x10"`` -> 0.0, ``"1_000"`` -> 1.0, ``"abc"`` -> None.
    """
    match = _LEADING_NUMBER_RE.match(text.lstrip())
    if match is None:
        return None
    return float(match.group(0).replace("Infinity", "inf"))


def format_number(value: int | float) -> str:
    """Render a number the way it shows up in form messages and exports.

    Integral values drop ``.0``, non-finite values read ``NaN``/``Infinity``,
    and exponents are only used below 1e-6 or from 1e21 up.
    """
    if isinstance(value, bool) or not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text and 1e-6 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    return _EXPONENT_PADDING_RE.sub(r"e\1\2", text)
