"""Dashboard service - admin and client read views, coupon statistics.

Reads are split into essential and best-effort fetches: clients and
purchases must load or the view fails, coupons degrade to an empty list.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from django.db import DatabaseError, transaction
from django.utils import timezone

from carimbo import clock
from carimbo.conf import carimbo_settings
from carimbo.models import Client, Coupon, Purchase
from carimbo.services import client as client_service
from carimbo.services import coupon as coupon_service
from carimbo.services import purchase as purchase_service

logger = logging.getLogger(__name__)


@dataclass
class DashboardData:
    """Full collections loaded for the admin dashboard."""

    clients: list[Client]
    purchases: list[Purchase]
    coupons: list[Coupon]
    coupons_available: bool = True


@dataclass
class DashboardStats:
    """Quick statistics shown on the admin dashboard."""

    total_clients: int
    active_coupons: int
    purchases_today: int
    total_stamps: int


@dataclass
class CouponBucket:
    """Coupon count for a time window."""

    label: str
    start: datetime
    end: datetime
    coupons: int


@dataclass
class ClientView:
    """What a client sees when looking up their card."""

    client: Client
    coupons: list[Coupon] = field(default_factory=list)
    active_coupons: list[Coupon] = field(default_factory=list)
    recent_purchases: list[Purchase] = field(default_factory=list)


def load() -> DashboardData:
    """
    Load clients, purchases and coupons.

    Raises:
        DatabaseError: If clients or purchases cannot be read
    """
    clients = client_service.list_all()
    purchases = purchase_service.list_all()

    try:
        with transaction.atomic():
            coupons = coupon_service.list_all()
        available = True
    except DatabaseError as exc:
        logger.warning("Could not load coupons for dashboard (ignored): %s", exc)
        coupons = []
        available = False

    return DashboardData(
        clients=clients,
        purchases=purchases,
        coupons=coupons,
        coupons_available=available,
    )


def client_view(cpf: str, now: datetime | None = None) -> ClientView | None:
    """
    Card lookup for a client: profile, coupons and last purchases.

    Returns None when the client does not exist. Coupon and purchase
    history are best-effort.
    """
    client = client_service.get(cpf)
    if not client:
        return None

    now = now or clock.now()
    view = ClientView(client=client)

    try:
        with transaction.atomic():
            view.coupons = coupon_service.by_client(client.cpf)
    except DatabaseError as exc:
        logger.warning("Could not load coupons for %s (ignored): %s", client.cpf, exc)
    view.active_coupons = coupon_service.active_only(view.coupons, now)

    try:
        with transaction.atomic():
            view.recent_purchases = purchase_service.by_client(
                client.cpf, limit=carimbo_settings.RECENT_PURCHASES
            )
    except DatabaseError as exc:
        logger.warning("Could not load purchases for %s (ignored): %s", client.cpf, exc)

    return view


def stats(data: DashboardData, now: datetime | None = None) -> DashboardStats:
    now = now or clock.now()
    return DashboardStats(
        total_clients=len(data.clients),
        active_coupons=len(coupon_service.active_only(data.coupons, now)),
        purchases_today=len(purchase_service.made_on_day(data.purchases, now)),
        total_stamps=sum(c.current_stamps for c in data.clients),
    )


def weekly_coupon_counts(
    coupons,
    now: datetime | None = None,
    weeks: int | None = None,
) -> list[CouponBucket]:
    """
    Coupons issued per rolling 7-day window ending at now, oldest first.

    Window i covers (now - 7*(i+1) days, now - 7*i days].
    """
    now = timezone.localtime(now or clock.now())
    if weeks is None:
        weeks = carimbo_settings.DASHBOARD_WEEKS
    coupons = list(coupons)

    buckets = []
    for i in range(weeks):
        end = now - timedelta(days=7 * i)
        start = end - timedelta(days=7)
        count = sum(1 for c in coupons if start < c.issued_at <= end)
        label = f"{start:%d/%m} - {end:%d/%m}"
        buckets.append(CouponBucket(label=label, start=start, end=end, coupons=count))

    return list(reversed(buckets))


def monthly_coupon_counts(
    coupons,
    now: datetime | None = None,
    months: int | None = None,
) -> list[CouponBucket]:
    """Coupons issued per local calendar month (year + month), oldest first."""
    now = timezone.localtime(now or clock.now())
    if months is None:
        months = carimbo_settings.DASHBOARD_MONTHS
    issued = [timezone.localtime(c.issued_at) for c in coupons]

    buckets = []
    for i in range(months):
        year, month = _shift_month(now.year, now.month, -i)
        start = now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)
        next_year, next_month = _shift_month(year, month, 1)
        end = start.replace(year=next_year, month=next_month)
        count = sum(1 for d in issued if d.year == year and d.month == month)
        buckets.append(
            CouponBucket(label=f"{month:02d}/{year}", start=start, end=end, coupons=count)
        )

    return list(reversed(buckets))


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
