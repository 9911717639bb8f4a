"""Loyalty ledger - purchase recording, stamp accrual and coupon issuance.

A purchase and its effect on the client card are written in a single
transaction. The client row is locked with select_for_update() so
concurrent purchases for the same client are applied one after the other:
no increment is lost and each threshold crossing issues exactly one coupon.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from carimbo import clock
from carimbo.conf import carimbo_settings
from carimbo.exceptions import CarimboError
from carimbo.models import Client, Purchase
from carimbo.services import coupon as coupon_service
from carimbo.services.stamps import stamps_for
from carimbo.signals import purchase_recorded
from carimbo.utils import normalize_cpf

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass
class PurchaseResult:
    """Outcome of a recorded purchase."""

    purchase_id: int
    cpf: str
    amount: Decimal
    stamps_generated: int
    current_stamps: int
    coupon_generated: bool = False
    coupon_id: int | None = None
    coupon_code: str | None = None


def record_purchase(cpf: str, amount) -> PurchaseResult:
    """
    Record a purchase and apply its stamps to the client card.

    The caller validates the CPF format and that amount is positive.
    When the new balance reaches STAMPS_THRESHOLD a coupon is issued and
    the balance goes back to 0; stamps above the threshold are discarded.

    Args:
        cpf: Client CPF
        amount: Purchase amount (rounded to cents)

    Returns:
        PurchaseResult

    Raises:
        CarimboError: CLIENT_NOT_FOUND (the purchase is rolled back)
    """
    key = normalize_cpf(cpf)
    value = Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)
    stamps = stamps_for(value)
    now = clock.now()

    with transaction.atomic():
        purchase = Purchase.objects.create(
            client_cpf=key,
            amount=value,
            stamps_generated=stamps,
            created_at=now,
        )

        client = _get_client_for_update(key)

        new_balance = client.current_stamps + stamps
        coupon = None
        if new_balance >= carimbo_settings.STAMPS_THRESHOLD:
            coupon = coupon_service.issue(key, now=now)
            new_balance = 0

        client.current_stamps = new_balance
        client.last_purchase_at = now
        client.save(update_fields=["current_stamps", "last_purchase_at", "updated_at"])

    result = PurchaseResult(
        purchase_id=purchase.pk,
        cpf=key,
        amount=value,
        stamps_generated=stamps,
        current_stamps=new_balance,
        coupon_generated=coupon is not None,
        coupon_id=coupon.pk if coupon else None,
        coupon_code=coupon.code if coupon else None,
    )

    logger.info(
        "Purchase %s recorded for %s: R$ %s, +%d stamps, balance %d%s",
        purchase.pk,
        key,
        value,
        stamps,
        new_balance,
        " (coupon issued)" if coupon else "",
    )
    transaction.on_commit(
        lambda: purchase_recorded.send(sender=Purchase, purchase=purchase, result=result)
    )
    return result


def _get_client_for_update(cpf: str) -> Client:
    """
    Get client with row-level lock for the stamp update.

    MUST be called inside transaction.atomic().
    """
    try:
        return Client.objects.select_for_update().get(pk=cpf)
    except Client.DoesNotExist:
        raise CarimboError("CLIENT_NOT_FOUND", cpf=cpf)
