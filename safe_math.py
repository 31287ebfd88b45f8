"""
Safe Math Utility - Numeric Coercion for Upstream Market Data

Upstream pair JSON is loosely typed: numbers arrive as ints, floats,
decimal strings, null, or not at all. Every classifier reads its inputs
through these helpers so a malformed field can never raise or leak NaN.
"""
import math
from typing import Any, Union, Optional


def safe_num(value: Any, default: float = 0.0) -> float:
    """
    Safe numeric extraction.

    Converts anything float() accepts into a finite float. Missing,
    non-numeric, NaN and infinite values all collapse to ``default``
    (zero unless told otherwise). Booleans are not numbers here.

    Examples:
        >>> safe_num("12.5")
        12.5
        >>> safe_num(None)
        0.0
        >>> safe_num("abc")
        0.0
        >>> safe_num(float("nan"), default=1.0)
        1.0
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        number = float(value)
    except (TypeError, ValueError):
        return default

    if not math.isfinite(number):
        return default

    return number


def safe_div(
    numerator: Union[int, float, None],
    denominator: Union[int, float, None],
    default: float = 0.0
) -> float:
    """
    numerator / denominator, or default when either side is missing or
    unusable, the denominator is zero, or the result is not finite.

    Examples:
        >>> safe_div(150000, 50000)
        3.0
        >>> safe_div(1, 0, default=-1.0)
        -1.0
    """
    if numerator is None or denominator is None:
        return default

    if denominator == 0:
        return default

    try:
        result = float(numerator) / float(denominator)
    except (TypeError, ValueError, ZeroDivisionError):
        return default

    return result if math.isfinite(result) else default


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def optional_num(value: Any) -> Optional[float]:
    """
    Like safe_num, but keeps "absent" distinguishable from zero.

    Used when projecting raw pairs so a missing field stays None until a
    classifier actually consumes it.
    """
    if value is None:
        return None
    number = safe_num(value, default=math.nan)
    return None if math.isnan(number) else number
