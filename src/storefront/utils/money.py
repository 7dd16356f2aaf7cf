"""Monetary rounding helpers.

Amounts are stored as floats (Protean ``Float`` fields) but every computed amount
goes through ``Decimal`` and is rounded half-up to cents before it is stored.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def round_money(value) -> float:
    """Round a monetary amount to two decimal places."""
    return float(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def line_total(unit_price, quantity) -> Decimal:
    return to_decimal(unit_price) * int(quantity)


def discounted_price(price, percentage) -> float:
    """``price × (1 − percentage/100)`` rounded to cents."""
    factor = Decimal(1) - to_decimal(percentage) / Decimal(100)
    return round_money(to_decimal(price) * factor)
