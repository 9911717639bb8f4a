"""Injectable "now" used for purchases, coupon validity and dashboards."""

from datetime import datetime

from django.utils import timezone
from django.utils.module_loading import import_string

from carimbo.conf import carimbo_settings


def now() -> datetime:
    """Current time from the configured CLOCK callable."""
    return import_string(carimbo_settings.CLOCK)()


def today():
    """Current local calendar date."""
    return timezone.localdate(now())
