"""Float tolerance policy — one epsilon per semantic category."""

from typing import Literal

PRICE_EPSILON = 1e-4
MONEY_EPSILON = 0.01
RATIO_EPSILON = 0.01

Category = Literal["price", "money", "ratio"]

_EPSILONS: dict[str, float] = {
    "price": PRICE_EPSILON,
    "money": MONEY_EPSILON,
    "ratio": RATIO_EPSILON,
}


def approx_equal(a: float, b: float, category: Category) -> bool:
    """True when ``a`` and ``b`` differ by less than the category's epsilon."""
    return abs(a - b) < _EPSILONS[category]


def is_negligible(value: float, category: Category) -> bool:
    return abs(value) < _EPSILONS[category]
