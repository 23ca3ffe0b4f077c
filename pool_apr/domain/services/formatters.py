from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext


TWO_PLACES = Decimal("0.01")


def to_fixed(value: float) -> str:
    """Two-decimal string rounded half up on the exact binary value.

    Python's ``format(value, ".2f")`` rounds exact ties to even (0.125 -> 0.12);
    display strings round them up (0.125 -> 0.13).
    """
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    exact = Decimal(value)
    with localcontext() as ctx:
        # room for every integer digit, two decimals and a rounding carry
        ctx.prec = max(28, exact.adjusted() + 4)
        return str(exact.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def format_apr(apr: float) -> str:
    if math.isnan(apr) or apr == 0:
        return "0.00%"
    if apr < 0.01:
        return "<0.01%"
    if apr > 10000:
        return ">10,000%"
    return f"{to_fixed(apr)}%"


def format_usd(amount: float) -> str:
    if math.isnan(amount) or amount == 0:
        return "$0"
    if amount < 0.01:
        return "<$0.01"
    if amount >= 1_000_000:
        return f"${to_fixed(amount / 1_000_000)}M"
    if amount >= 1000:
        return f"${to_fixed(amount / 1000)}K"
    return f"${to_fixed(amount)}"
