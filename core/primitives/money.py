"""
Tradebook Money Helpers — Decimal Amounts
===========================================
Engine: Core Primitives

Every rate, value and balance in Tradebook is a ``decimal.Decimal``.
Floats are rejected at the boundary so that derived totals stay exact
and comparable bit-for-bit across recomputations.

RULES:
- Inputs may be Decimal, int or numeric str — never float
- Equality checks for postings happen at currency precision (2 places)
- Rounding is ROUND_HALF_UP (invoice convention)
- Rates carry at most 4 decimal places and 10 integer digits; line
  totals at most 2 places and 14 integer digits (the stored scale)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

Amount = Union[Decimal, int, str]

CURRENCY_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

RATE_PLACES = Decimal("0.0001")
RATE_LIMIT = Decimal(10) ** 10
MONEY_LIMIT = Decimal(10) ** 14


def to_decimal(value: Amount, field_name: str = "amount") -> Decimal:
    """Coerce a Decimal/int/str into Decimal. Floats are refused."""
    if isinstance(value, bool):
        raise TypeError(f"{field_name} must be numeric, got bool.")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(
                f"{field_name} must be a numeric string, got '{value}'."
            ) from exc
    else:
        raise TypeError(
            f"{field_name} must be Decimal, int or str, "
            f"got {type(value).__name__}. Floats are not accepted."
        )
    if not result.is_finite():
        raise ValueError(f"{field_name} must be finite.")
    return result


def check_scale(
    value: Decimal,
    places: Decimal,
    limit: Decimal,
    field_name: str = "amount",
) -> Decimal:
    """Refuse values that would not survive storage unchanged."""
    if abs(value) >= limit:
        raise ValueError(f"{field_name} {value} is too large (limit {limit}).")
    if value.quantize(places) != value:
        raise ValueError(
            f"{field_name} {value} has more than {-places.as_tuple().exponent} "
            "decimal places."
        )
    return value


def check_rate(value: Decimal, field_name: str = "rate") -> Decimal:
    return check_scale(value, RATE_PLACES, RATE_LIMIT, field_name)


def check_money(value: Decimal, field_name: str = "amount") -> Decimal:
    return check_scale(value, CURRENCY_PLACES, MONEY_LIMIT, field_name)


def quantize_money(value: Decimal) -> Decimal:
    """Round to currency precision."""
    return value.quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP)


def money_equal(a: Decimal, b: Decimal) -> bool:
    """Compare two amounts at currency precision."""
    return quantize_money(a) == quantize_money(b)


def percent_of(value: Decimal, percent: Decimal) -> Decimal:
    return value * percent / HUNDRED


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)
