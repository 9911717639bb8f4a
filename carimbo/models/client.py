"""Client model - stamp card holder keyed by CPF."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from carimbo.utils import format_cpf, normalize_cpf


class Client(models.Model):
    """
    Registered client.

    current_stamps stays within [0, STAMPS_THRESHOLD) between purchases:
    crossing the threshold issues a coupon and resets the card to zero.
    Only the ledger writes current_stamps and last_purchase_at.
    """

    cpf = models.CharField(
        _("CPF"),
        max_length=11,
        primary_key=True,
        help_text=_("Apenas números (11 dígitos)"),
    )
    name = models.CharField(_("nome"), max_length=200)
    phone = models.CharField(_("telefone"), max_length=20)
    email = models.EmailField(_("email"))
    birth_date = models.DateField(_("data de nascimento"), null=True, blank=True)

    # Stamp card
    current_stamps = models.PositiveIntegerField(
        _("carimbos atuais"),
        default=0,
        help_text=_("Carimbos na cartela atual"),
    )
    last_purchase_at = models.DateTimeField(_("última compra"), null=True, blank=True)

    # Audit
    created_at = models.DateTimeField(_("criado em"), auto_now_add=True)
    updated_at = models.DateTimeField(_("atualizado em"), auto_now=True)

    class Meta:
        verbose_name = _("cliente")
        verbose_name_plural = _("clientes")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="carimbo_client_name_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.formatted_cpf})"

    @property
    def formatted_cpf(self) -> str:
        return format_cpf(self.cpf)

    @property
    def stamps_remaining(self) -> int:
        """Stamps remaining to earn the next coupon."""
        from carimbo.conf import carimbo_settings

        return max(0, carimbo_settings.STAMPS_THRESHOLD - self.current_stamps)

    @property
    def stamps_progress_percent(self) -> int:
        """Stamp card completion percentage (0-100)."""
        from carimbo.conf import carimbo_settings

        threshold = carimbo_settings.STAMPS_THRESHOLD
        if threshold <= 0:
            return 100
        return min(100, int(self.current_stamps / threshold * 100))

    def save(self, *args, **kwargs):
        self.cpf = normalize_cpf(self.cpf)
        if self.email:
            self.email = self.email.lower().strip()
        super().save(*args, **kwargs)
