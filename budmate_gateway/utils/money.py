"""Money helpers"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from budmate_gateway.config import settings

Number = Union[Decimal, int, float, str]


def to_money(value: Number, places: int | None = None) -> Decimal:
    """
    Convert a numeric value to a Decimal rounded to the currency's minor unit.

    Floats go through str() so 19.99 stays 19.99 instead of its binary expansion.
    """
    if places is None:
        places = settings.currency_decimal_places
    if isinstance(value, float):
        value = str(value)
    quantum = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    """Exact sum of money amounts, zero for an empty iterable"""
    return to_money(sum(amounts, Decimal(0)))
