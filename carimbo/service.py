"""
Carimbo public API.

CORE (loyalty rule):
    LoyaltyService.record_purchase(cpf, amount) - Record sale, accrue stamps
    LoyaltyService.redeem_coupon(coupon_id)    - Mark coupon as used

CLIENTS:
    LoyaltyService.register_client(...)  - Register client
    LoyaltyService.lookup_client(cpf)    - Get client
    LoyaltyService.update_client(...)    - Edit phone/email/birth date
    LoyaltyService.search_clients(term)  - Name search

READ VIEWS:
    LoyaltyService.purchase_history(cpf)
    LoyaltyService.coupon_history(cpf)
    LoyaltyService.active_coupons(cpf)
    LoyaltyService.dashboard()
"""

from decimal import Decimal

from carimbo.gates import Gates
from carimbo.models import Client, Coupon, Purchase
from carimbo.services import client as client_service
from carimbo.services import coupon as coupon_service
from carimbo.services import dashboard as dashboard_service
from carimbo.services import ledger
from carimbo.services import purchase as purchase_service
from carimbo.services.ledger import PurchaseResult


class LoyaltyService:
    """
    Carimbo public API.

    Uses @classmethod for extensibility. Input is validated by Gates
    before any write, so a GateError never leaves partial state.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def record_purchase(cls, cpf: str, amount: Decimal | int | str) -> PurchaseResult:
        """
        Record a purchase for a registered client.

        Args:
            cpf: Client CPF (formatted or digits only)
            amount: Purchase amount in currency units

        Returns:
            PurchaseResult (coupon_generated=True when the card was completed)

        Raises:
            GateError: Invalid CPF or non-positive amount
            CarimboError: CLIENT_NOT_FOUND
        """
        Gates.cpf_format(cpf)
        value = Gates.positive_amount(amount)
        return ledger.record_purchase(cpf, value)

    @classmethod
    def redeem_coupon(cls, coupon_id: int) -> None:
        """
        Mark coupon as used.

        Raises:
            CarimboError: COUPON_NOT_FOUND
        """
        coupon_service.redeem(coupon_id)

    # ======================================================================
    # CLIENT API
    # ======================================================================

    @classmethod
    def register_client(
        cls,
        cpf: str,
        name: str,
        phone: str,
        email: str,
        birth_date=None,
    ) -> Client:
        """Register a client with an empty stamp card."""
        return client_service.register(
            cpf=cpf,
            name=name,
            phone=phone,
            email=email,
            birth_date=birth_date,
        )

    @classmethod
    def lookup_client(cls, cpf: str) -> Client | None:
        """Get client by CPF, or None."""
        Gates.cpf_format(cpf)
        return client_service.get(cpf)

    @classmethod
    def update_client(cls, cpf: str, **fields) -> Client:
        """Edit phone, email or birth date."""
        return client_service.update_profile(cpf, **fields)

    @classmethod
    def search_clients(cls, term: str, limit: int = 10) -> list[Client]:
        return client_service.search_by_name(term, limit=limit)

    # ======================================================================
    # READ VIEWS
    # ======================================================================

    @classmethod
    def purchase_history(cls, cpf: str) -> list[Purchase]:
        return purchase_service.by_client(cpf)

    @classmethod
    def coupon_history(cls, cpf: str) -> list[Coupon]:
        return coupon_service.by_client(cpf)

    @classmethod
    def active_coupons(cls, cpf: str) -> list[Coupon]:
        return coupon_service.active_for(cpf)

    @classmethod
    def client_view(cls, cpf: str) -> "dashboard_service.ClientView | None":
        Gates.cpf_format(cpf)
        return dashboard_service.client_view(cpf)

    @classmethod
    def dashboard(cls) -> "dashboard_service.DashboardData":
        return dashboard_service.load()
