from __future__ import annotations

import pytest

from pool_apr.domain.services.univ3_math import price_to_tick, tick_to_price


def test_price_to_tick_recovers_tick_within_one():
    assert abs(price_to_tick(1.0001 ** 5000) - 5000) <= 1


def test_price_to_tick_unit_price_is_tick_zero():
    assert price_to_tick(1.0) == 0


def test_price_to_tick_floors_toward_negative_infinity():
    # ln(0.99995) / ln(1.0001) is about -0.5; truncation would give 0
    assert price_to_tick(0.99995) == -1
    assert price_to_tick(1.00005) == 0


@pytest.mark.parametrize("price", [0.0, -1.0, float("nan"), float("inf")])
def test_price_to_tick_rejects_invalid_prices(price: float):
    with pytest.raises(ValueError):
        price_to_tick(price)


def test_tick_to_price_matches_tick_base_power():
    assert tick_to_price(0) == 1.0
    assert tick_to_price(1) == pytest.approx(1.0001)
    assert tick_to_price(-1) == pytest.approx(1 / 1.0001)


@pytest.mark.parametrize("tick", [-200000, -1, 1, 5000, 202920])
def test_round_trip_is_approximate(tick: int):
    assert abs(price_to_tick(tick_to_price(tick)) - tick) <= 1
