from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class CarimboConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "carimbo"
    verbose_name = _("Carimbo - Cartão Fidelidade")
