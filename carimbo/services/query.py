"""Ordered reads with an in-memory fallback."""

import logging
from operator import attrgetter

from django.db import DatabaseError, transaction
from django.db.models import QuerySet

logger = logging.getLogger(__name__)


def newest_first(qs: QuerySet, field: str) -> list:
    """
    Evaluate qs ordered by field descending.

    If the backend rejects the ordered query, fetch unordered and sort in
    Python so callers still get the full result newest first.
    """
    try:
        # Savepoint: a rejected query must not abort an outer transaction
        with transaction.atomic(using=qs.db):
            return list(qs.order_by(f"-{field}"))
    except DatabaseError as exc:
        logger.warning(
            "Ordered query on %s failed (%s); sorting in memory",
            qs.model._meta.label,
            exc,
        )
        return sorted(qs.all(), key=attrgetter(field), reverse=True)
