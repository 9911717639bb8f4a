"""Coupon service - issuance, redemption and coupon history."""

import logging
from datetime import datetime, timedelta

from django.db import transaction
from django.utils import timezone

from carimbo import clock
from carimbo.conf import carimbo_settings
from carimbo.exceptions import CarimboError
from carimbo.models import Coupon
from carimbo.models.coupon import generate_coupon_code
from carimbo.services.query import newest_first
from carimbo.signals import coupon_issued, coupon_redeemed
from carimbo.utils import normalize_cpf

logger = logging.getLogger(__name__)


def valid_until_for(issued_at: datetime) -> datetime:
    """
    Expiry for a coupon issued at issued_at.

    Adds COUPON_VALIDITY_DAYS calendar days in local time, so the wall-clock
    time is kept even when the offset changes in between.
    """
    local = timezone.localtime(issued_at)
    return local + timedelta(days=carimbo_settings.COUPON_VALIDITY_DAYS)


def issue(cpf: str, now: datetime | None = None) -> Coupon:
    """
    Issue a discount coupon for a client.

    Does not check for other active coupons: a client may hold several.
    coupon_issued is sent once the surrounding transaction commits.

    Args:
        cpf: Client CPF
        now: Issue time (defaults to the configured clock)

    Returns:
        Created Coupon
    """
    issued_at = now or clock.now()
    coupon = Coupon.objects.create(
        client_cpf=normalize_cpf(cpf),
        code=generate_coupon_code(carimbo_settings.COUPON_CODE_PREFIX),
        discount_rate=carimbo_settings.COUPON_DISCOUNT_RATE,
        used=False,
        issued_at=issued_at,
        valid_until=valid_until_for(issued_at),
    )
    logger.info("Coupon %s issued for %s", coupon.code, coupon.client_cpf)
    transaction.on_commit(lambda: coupon_issued.send(sender=Coupon, coupon=coupon))
    return coupon


def get(coupon_id: int) -> Coupon | None:
    """Get coupon by id."""
    try:
        return Coupon.objects.get(pk=coupon_id)
    except Coupon.DoesNotExist:
        return None


def redeem(coupon_id: int) -> Coupon:
    """
    Mark a coupon as used.

    Expiry is not checked. Redeeming an already used coupon is a no-op.

    Raises:
        CarimboError: COUPON_NOT_FOUND
    """
    with transaction.atomic():
        try:
            coupon = Coupon.objects.select_for_update().get(pk=coupon_id)
        except Coupon.DoesNotExist:
            raise CarimboError("COUPON_NOT_FOUND", coupon_id=coupon_id)

        if coupon.used:
            return coupon

        coupon.used = True
        coupon.save(update_fields=["used"])

    logger.info("Coupon %s redeemed", coupon.code)
    transaction.on_commit(lambda: coupon_redeemed.send(sender=Coupon, coupon=coupon))
    return coupon


def by_client(cpf: str) -> list[Coupon]:
    """Coupons of a client, newest first."""
    return newest_first(Coupon.objects.filter(client_cpf=normalize_cpf(cpf)), "issued_at")


def list_all() -> list[Coupon]:
    """Every coupon, newest first."""
    return newest_first(Coupon.objects.all(), "issued_at")


def active_only(coupons, now: datetime | None = None) -> list[Coupon]:
    """Keep the coupons that are unused and not expired at now."""
    now = now or clock.now()
    return [c for c in coupons if c.is_active(now)]


def active_for(cpf: str, now: datetime | None = None) -> list[Coupon]:
    """Coupons a client can still use, newest first."""
    return active_only(by_client(cpf), now)


def filter_by_cpf(coupons, term: str) -> list[Coupon]:
    """Substring match on CPF digits; a blank term keeps everything."""
    digits = normalize_cpf(term)
    if not term.strip():
        return list(coupons)
    if not digits:
        return []
    return [c for c in coupons if digits in c.client_cpf]
