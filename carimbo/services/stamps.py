"""Stamp calculator."""

from decimal import ROUND_FLOOR, Decimal

from carimbo.conf import carimbo_settings


def stamps_for(amount) -> int:
    """
    Stamps earned for a purchase amount: floor(amount / STAMP_UNIT_VALUE).

    Amounts below one unit (zero and negatives included) earn nothing.
    Callers reject non-positive amounts before recording a purchase.
    """
    value = Decimal(str(amount))
    unit = carimbo_settings.STAMP_UNIT_VALUE
    if value < unit:
        return 0
    return int((value / unit).to_integral_value(rounding=ROUND_FLOOR))
