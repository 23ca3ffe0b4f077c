from __future__ import annotations

import math


TICK_BASE = 1.0001
LOG_BASE = math.log(TICK_BASE)


def price_to_tick(price: float) -> int:
    """Tick whose price is the greatest one not above ``price``.

    Rounds toward negative infinity so prices just below a tick boundary land
    on the lower tick for negative ticks too.
    """
    if not math.isfinite(price) or price <= 0:
        raise ValueError("price must be positive.")
    return math.floor(math.log(price) / LOG_BASE)


def tick_to_price(tick: int | float) -> float:
    return TICK_BASE ** tick
