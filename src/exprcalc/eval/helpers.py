from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any

_NUMERIC_TEXT = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity')

def is_truthy(val: Any) -> bool:
    match val:
        case None:
            return False
        case bool():
            return val
        case int() | float():
            return val != 0 and not math.isnan(val)
        case str():
            return bool(val)
        case _:
            return True

def to_number(val: Any) -> float:
    """Numeric coercion; values with no numeric reading become NaN."""
    match val:
        case bool():
            return 1.0 if val else 0.0
        case float():
            return val
        case int():
            try:
                return float(val)
            except OverflowError:
                return math.inf if val > 0 else -math.inf
        case str():
            text = val.strip()
            if not text:
                return 0.0
            if _NUMERIC_TEXT.fullmatch(text) is None:
                return math.nan
            return float(text.replace('Infinity', 'inf'))
        case _:
            return math.nan

def stringify(val: Any) -> str:
    """Textual form used when `+` concatenates."""
    match val:
        case None:
            return "undefined"
        case str():
            return val
        case bool():
            return "true" if val else "false"
        case int():
            return str(val)
        case float():
            return _format_float(val)
        case _:
            return str(val)

def _format_float(num: float) -> str:
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"
    if num.is_integer() and abs(num) < 1e21:
        return str(int(num))
    if 1e-6 <= abs(num) < 1e21:
        return format(Decimal(repr(num)), 'f')

    # shortest digits, exponent without padding: 1e-7, 1.5e-10, 1e+21
    mantissa, _, exponent = repr(num).partition('e')
    power = int(exponent)
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
