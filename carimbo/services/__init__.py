"""Carimbo services.

- stamps: amount -> stamp count
- coupon: issuance, redemption, coupon history
- client: registration, lookup, profile edits
- purchase: purchase history
- ledger: purchase recording (stamp accrual + coupon issuance)
- dashboard: admin/client read views and coupon statistics
"""

from carimbo.services import stamps
from carimbo.services import coupon
from carimbo.services import client
from carimbo.services import purchase
from carimbo.services import ledger
from carimbo.services import dashboard

__all__ = ["stamps", "coupon", "client", "purchase", "ledger", "dashboard"]
