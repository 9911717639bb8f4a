"""Test helpers: a clock the tests can set."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

SAO_PAULO = ZoneInfo("America/Sao_Paulo")

NOW = datetime(2026, 10, 18, 14, 30, tzinfo=SAO_PAULO)


class FrozenClock:
    """Module-level clock referenced by CARIMBO["CLOCK"] in tests."""

    current: datetime | None = None

    @classmethod
    def set(cls, value: datetime) -> None:
        cls.current = value

    @classmethod
    def advance(cls, **kwargs) -> datetime:
        cls.current = cls.current + timedelta(**kwargs)
        return cls.current


def frozen_now() -> datetime:
    return FrozenClock.current
