"""Number rounding and JavaScript literal formatting."""

import math
from decimal import ROUND_HALF_UP, Decimal

from notso_jsx.utils.constants import ANGLE_MAX_DIVISOR, ANGLE_SCALE


def round_number(value: float, precision: int = 2) -> float:
    """
    Round half away from zero on the exact binary value.

    Mirrors JavaScript's ``parseFloat(n.toFixed(precision))`` so 0.005 at
    precision 2 becomes 0.01 and 0.004 becomes 0.
    """
    quantum = Decimal(1).scaleb(-max(0, int(precision)))
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Format a float the way JavaScript prints it (1, 0.5, never -0)."""
    if value == 0:
        return "0"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def format_rounded(value: float, precision: int = 2) -> str:
    """Round then format."""
    return format_number(round_number(value, precision))


def _js_round(value: float) -> int:
    """Math.round: halves go towards +infinity."""
    return math.floor(value + 0.5)


def format_angle(value: float, precision: int = 2) -> str:
    """
    Render radians as a multiple or fraction of Math.PI when it matches
    within 1e-5, else as a rounded decimal.
    """
    scaled = abs(_js_round(value * ANGLE_SCALE))
    sign = "-" if value < 0 else ""
    for i in range(1, ANGLE_MAX_DIVISOR + 1):
        if scaled == _js_round(math.pi / i * ANGLE_SCALE):
            return f"{sign}Math.PI" + (f" / {i}" if i > 1 else "")
    for i in range(1, ANGLE_MAX_DIVISOR + 1):
        if scaled == _js_round(math.pi * i * ANGLE_SCALE):
            return f"{sign}Math.PI" + (f" * {i}" if i > 1 else "")
    return format_rounded(value, precision)


def vector_length(x: float, y: float, z: float) -> float:
    return math.sqrt(x * x + y * y + z * z)
