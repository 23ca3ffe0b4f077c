from __future__ import annotations

import pytest

from pool_apr.domain.services.formatters import format_apr, format_usd, to_fixed


@pytest.mark.parametrize(
    ("apr", "expected"),
    [
        (0, "0.00%"),
        (0.005, "<0.01%"),
        (-3, "<0.01%"),
        (0.01, "0.01%"),
        (12.5, "12.50%"),
        (10000, "10000.00%"),
        (10000.01, ">10,000%"),
        (15000, ">10,000%"),
        (float("nan"), "0.00%"),
    ],
)
def test_format_apr(apr: float, expected: str):
    assert format_apr(apr) == expected


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (0, "$0"),
        (0.004, "<$0.01"),
        (500, "$500.00"),
        (999.999, "$1000.00"),
        (1000, "$1.00K"),
        (1500, "$1.50K"),
        (1_000_000, "$1.00M"),
        (2_500_000, "$2.50M"),
    ],
)
def test_format_usd(amount: float, expected: str):
    assert format_usd(amount) == expected


def test_to_fixed_rounds_exact_ties_up():
    assert to_fixed(0.125) == "0.13"
    assert to_fixed(2.675) == "2.67"  # 2.675 is stored slightly below the tie
    assert to_fixed(3) == "3.00"


def test_huge_amounts_render_without_raising():
    assert format_usd(1e40).endswith(".00M")
    assert format_usd(1e40).startswith("$")
    assert format_apr(1e300) == ">10,000%"
    assert to_fixed(1e30) == "1000000000000000019884624838656.00"
