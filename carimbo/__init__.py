"""
Django Carimbo - Loyalty stamp card.

Usage:
    from carimbo import LoyaltyService
    from carimbo.gates import Gates, GateError, GateResult

    LoyaltyService.register_client("123.456.789-01", name="Maria", ...)
    result = LoyaltyService.record_purchase("12345678901", Decimal("300.00"))
    if result.coupon_generated:
        LoyaltyService.redeem_coupon(result.coupon_id)

    # Gates validation
    Gates.cpf_format("123.456.789-01")
    Gates.positive_amount("150.00")
"""


def __getattr__(name):
    if name == "LoyaltyService":
        from carimbo.service import LoyaltyService

        return LoyaltyService
    if name == "Gates":
        from carimbo.gates import Gates

        return Gates
    if name == "GateError":
        from carimbo.gates import GateError

        return GateError
    if name == "GateResult":
        from carimbo.gates import GateResult

        return GateResult
    if name == "CarimboError":
        from carimbo.exceptions import CarimboError

        return CarimboError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LoyaltyService", "Gates", "GateError", "GateResult", "CarimboError"]
__version__ = "0.1.0"
