"""
Carimbo configuration.

Usage in settings.py:
    CARIMBO = {
        "STAMP_UNIT_VALUE": "150",
        "STAMPS_THRESHOLD": 10,
        "COUPON_VALIDITY_DAYS": 30,
        "CLOCK": "myproject.clock.frozen_now",
    }
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from django.conf import settings


@dataclass
class CarimboSettings:
    """Carimbo configuration settings."""

    # Currency units per stamp
    STAMP_UNIT_VALUE: Decimal = Decimal("150")

    # Stamps needed for a coupon
    STAMPS_THRESHOLD: int = 10

    # Coupon issued on threshold crossing
    COUPON_DISCOUNT_RATE: Decimal = Decimal("0.15")
    COUPON_VALIDITY_DAYS: int = 30
    COUPON_CODE_PREFIX: str = "SIX15"

    # Dotted path to a callable returning an aware datetime
    CLOCK: str = "django.utils.timezone.now"

    # Dashboard windows
    DASHBOARD_WEEKS: int = 4
    DASHBOARD_MONTHS: int = 6
    RECENT_PURCHASES: int = 5

    def __post_init__(self):
        self.STAMP_UNIT_VALUE = Decimal(str(self.STAMP_UNIT_VALUE))
        self.COUPON_DISCOUNT_RATE = Decimal(str(self.COUPON_DISCOUNT_RATE))


def get_carimbo_settings() -> CarimboSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "CARIMBO", {})
    return CarimboSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_carimbo_settings(), name)


carimbo_settings = _LazySettings()
