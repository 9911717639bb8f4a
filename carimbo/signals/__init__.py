"""
Carimbo signals - public event API.

Emitted signals:
- client_registered: Emitted by services.client.register()
- client_updated: Emitted by services.client.update_profile()
- purchase_recorded: Emitted by services.ledger.record_purchase()
- coupon_issued: Emitted by services.coupon.issue()
- coupon_redeemed: Emitted by services.coupon.redeem() on the first redemption
"""

from django.dispatch import Signal

# Client signals
client_registered = Signal()  # sender=Client, client=Client
client_updated = Signal()  # sender=Client, client=Client, changes=dict

# Ledger signals
purchase_recorded = Signal()  # sender=Purchase, purchase=Purchase, result=PurchaseResult
coupon_issued = Signal()  # sender=Coupon, coupon=Coupon
coupon_redeemed = Signal()  # sender=Coupon, coupon=Coupon
