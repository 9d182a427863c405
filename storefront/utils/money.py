"""
Money helpers
Prices are Decimal major units (RM); payment amounts are integer minor units (sen).
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple, Union

Number = Union[Decimal, int, float, str]

CENTS = Decimal(100)


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps float prices like 8.1 from picking up binary noise
    return Decimal(str(value))


def to_minor_units(amount: Number) -> int:
    """Major units to minor units, rounding half away from zero"""
    scaled = to_decimal(amount) * CENTS
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> Decimal:
    return (Decimal(cents) / CENTS).quantize(Decimal("0.01"))


def payable_minor_units(lines: Iterable[Tuple[Number, int]]) -> int:
    """Sum of unit_price x quantity, converted once at the end"""
    total = sum((to_decimal(price) * qty for price, qty in lines), Decimal(0))
    return to_minor_units(total)


def format_money(cents: int, currency: str = "RM") -> str:
    return f"{currency} {from_minor_units(cents)}"
