"""Carimbo models.

Client is keyed by CPF. Purchase and Coupon reference the client by CPF
only (no foreign key), mirroring a document store where collections are
joined by the application.
"""

from carimbo.models.client import Client
from carimbo.models.purchase import Purchase
from carimbo.models.coupon import Coupon

__all__ = [
    "Client",
    "Purchase",
    "Coupon",
]
