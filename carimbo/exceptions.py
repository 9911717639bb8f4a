"""Carimbo exceptions."""


class CarimboError(Exception):
    """
    Structured exception for loyalty operations.

    Usage:
        try:
            LoyaltyService.record_purchase("12345678901", amount)
        except CarimboError as e:
            if e.code == "CLIENT_NOT_FOUND":
                handle_not_found()
    """

    _default_messages = {
        "CLIENT_NOT_FOUND": "Client not found",
        "CLIENT_ALREADY_EXISTS": "Client already registered",
        "COUPON_NOT_FOUND": "Coupon not found",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
