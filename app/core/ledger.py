# app/core/ledger.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import NamedTuple, Union

from app.core.errors import InvalidAmount

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Money = Union[Decimal, int, float, str]


class FeeSplit(NamedTuple):
    platform_fee: Decimal
    creator_earnings: Decimal


def _to_decimal(value: Money) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmount(f"Malformed amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Malformed amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmount(f"Malformed amount: {value!r}")
    return amount


def to_money(value: Money) -> Decimal:
    """
    Coerce a submitted amount to a 2dp Decimal. Floats go through str() to
    avoid binary noise. Anything finer than a paisa is refused, not rounded.
    """
    amount = _to_decimal(value)
    if amount != amount.quantize(CENT):
        raise InvalidAmount(f"Amount {value!r} has more than two decimal places")
    return amount.quantize(CENT)


def round_money(value: Money) -> Decimal:
    """Round a computed figure (averages, percentages) to the paisa."""
    return _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def split(amount: Money, fee_percentage: Money) -> FeeSplit:
    """
    Split an order amount into the platform fee and the creator's share.

    The fee is rounded once to the paisa; earnings are the remainder so the
    two parts always add back up to ``amount``.
    """
    amount = to_money(amount)
    if amount <= ZERO:
        raise InvalidAmount("Amount must be greater than zero")

    pct = Decimal(str(fee_percentage)) if isinstance(fee_percentage, float) else Decimal(fee_percentage)
    if pct < 0 or pct > 100:
        raise InvalidAmount(f"Fee percentage out of range: {fee_percentage}")

    platform_fee = (amount * pct / Decimal(100)).quantize(CENT, rounding=ROUND_HALF_UP)
    return FeeSplit(platform_fee=platform_fee, creator_earnings=amount - platform_fee)
