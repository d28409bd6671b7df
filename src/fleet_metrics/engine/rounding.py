"""Half-up rounding for generated figures.

Built-in ``round`` rounds ties to even; published figures round ties away
from zero (``1177852.5`` → ``1177853``).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round *value* to *digits* decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    """Nearest integer, ties away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
