"""Purchase model - append-only sales log."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Purchase(models.Model):
    """
    Recorded sale.

    stamps_generated is derived from amount when the purchase is recorded
    and never changes afterwards. Purchases are never updated or deleted.
    """

    client_cpf = models.CharField(_("CPF do cliente"), max_length=11, db_index=True)
    amount = models.DecimalField(_("valor da compra"), max_digits=12, decimal_places=2)
    stamps_generated = models.PositiveIntegerField(_("carimbos gerados"), default=0)
    created_at = models.DateTimeField(_("data"), db_index=True)

    class Meta:
        verbose_name = _("compra")
        verbose_name_plural = _("compras")
        indexes = [
            models.Index(fields=["client_cpf", "-created_at"], name="carimbo_purchase_cpf_date_idx"),
        ]

    def __str__(self):
        return f"{self.client_cpf}: R$ {self.amount} (+{self.stamps_generated})"
