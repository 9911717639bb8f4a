"""Purchase service - purchase history reads."""

from datetime import datetime

from django.utils import timezone

from carimbo import clock
from carimbo.models import Purchase
from carimbo.services.query import newest_first
from carimbo.utils import normalize_cpf


def by_client(cpf: str, limit: int | None = None) -> list[Purchase]:
    """Purchases of a client, newest first."""
    purchases = newest_first(
        Purchase.objects.filter(client_cpf=normalize_cpf(cpf)), "created_at"
    )
    if limit is not None:
        return purchases[:limit]
    return purchases


def list_all() -> list[Purchase]:
    """Every purchase, newest first."""
    return newest_first(Purchase.objects.all(), "created_at")


def made_on_day(purchases, now: datetime | None = None) -> list[Purchase]:
    """Purchases whose local calendar date equals the local date of now."""
    today = timezone.localdate(now or clock.now())
    return [p for p in purchases if timezone.localdate(p.created_at) == today]
