"""Coupon model - discount earned by completing a stamp card."""

import secrets
import string
from datetime import datetime

from django.db import models
from django.utils.translation import gettext_lazy as _

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_coupon_code(prefix: str, length: int = 6) -> str:
    """Human-readable code such as SIX15-4KQ9ZB."""
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))
    return f"{prefix}-{suffix}"


class Coupon(models.Model):
    """
    Discount coupon.

    Issued only by the ledger on threshold crossing. The single allowed
    mutation is used False -> True. Active means unused and not past
    valid_until; use is_active() everywhere a coupon is shown as available.
    """

    client_cpf = models.CharField(_("CPF do cliente"), max_length=11, db_index=True)
    code = models.CharField(_("código"), max_length=32, unique=True)
    discount_rate = models.DecimalField(
        _("desconto"),
        max_digits=4,
        decimal_places=2,
        help_text=_("Fração do valor (0.15 = 15%)"),
    )
    used = models.BooleanField(_("usado"), default=False)
    issued_at = models.DateTimeField(_("criado em"), db_index=True)
    valid_until = models.DateTimeField(_("válido até"))

    class Meta:
        verbose_name = _("cupom")
        verbose_name_plural = _("cupons")
        indexes = [
            models.Index(fields=["client_cpf", "-issued_at"], name="carimbo_coupon_cpf_date_idx"),
        ]

    def __str__(self):
        return f"{self.code} ({self.discount_percent}%)"

    @property
    def discount_percent(self) -> int:
        return int(self.discount_rate * 100)

    def is_active(self, now: datetime | None = None) -> bool:
        """Unused and now <= valid_until."""
        if now is None:
            from carimbo.clock import now as clock_now

            now = clock_now()
        return not self.used and now <= self.valid_until

    def days_left(self, now: datetime | None = None) -> int:
        """Whole days until expiry, rounded up (0 once expired)."""
        if now is None:
            from carimbo.clock import now as clock_now

            now = clock_now()
        seconds = (self.valid_until - now).total_seconds()
        if seconds <= 0:
            return 0
        return int(-(-seconds // 86400))
