# storefront/core/money.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """
    Round to cents (half-up), matching NUMERIC(10,2) columns.

    Floats go through str() so 24.99 stays 24.99.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
