"""
Carimbo Gates - Validation rules.

Every gate runs before any write, so a failing gate leaves no partial state.

G1: CpfFormat - CPF has exactly 11 digits (no check-digit validation)
G2: PositiveAmount - Purchase amount is positive and fits the amount column
G3: RequiredFields - Registration fields are present and non-blank
G4: EmailFormat - Email is syntactically valid
G5: PhoneLength - Phone has at least 10 characters
G6: BirthDate - Birth date parses as a calendar date
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils.dateparse import parse_date

from carimbo.utils import is_valid_cpf, normalize_cpf


class GateError(Exception):
    """Gate validation error."""

    def __init__(self, gate_name: str, message: str, details: dict | None = None):
        self.gate_name = gate_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{gate_name}] {message}")


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Carimbo validation gates."""

    # =========================================================================
    # G1: CPF Format
    # =========================================================================

    @classmethod
    def cpf_format(cls, cpf: str) -> GateResult:
        """
        G1: CPF must have exactly 11 digits once separators are stripped.

        Args:
            cpf: CPF, formatted (000.000.000-00) or digits only

        Raises:
            GateError: If the digit count is not 11
        """
        if not is_valid_cpf(cpf):
            raise GateError(
                "G1_CpfFormat",
                "CPF must have 11 digits.",
                {"digits": len(normalize_cpf(cpf))},
            )

        return GateResult(True, "G1_CpfFormat")

    @classmethod
    def check_cpf_format(cls, cpf: str) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.cpf_format(cpf)
            return True
        except GateError:
            return False

    # =========================================================================
    # G2: Positive Amount
    # =========================================================================

    @classmethod
    def positive_amount(cls, amount) -> Decimal:
        """
        G2: Purchase amount must be a positive number that fits the
        Purchase.amount column once rounded to cents.

        Args:
            amount: Decimal, int, float or numeric string

        Returns:
            The amount as Decimal

        Raises:
            GateError: If amount is not numeric, not greater than zero
                or above the largest storable amount
        """
        from carimbo.models import Purchase

        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise GateError(
                "G2_PositiveAmount",
                "Amount is not a number.",
                {"amount": str(amount)},
            )

        if not value.is_finite() or value <= 0:
            raise GateError(
                "G2_PositiveAmount",
                "Amount must be positive.",
                {"amount": str(amount)},
            )

        field = Purchase._meta.get_field("amount")
        cents = Decimal(1).scaleb(-field.decimal_places)
        limit = Decimal(10) ** (field.max_digits - field.decimal_places) - cents

        # Bound checked before quantize: huge exponents overflow its precision
        if value > limit or value.quantize(cents, rounding=ROUND_HALF_UP) > limit:
            raise GateError(
                "G2_PositiveAmount",
                "Amount is too large.",
                {"amount": str(amount), "max": str(limit)},
            )

        # Fractions of a cent round to a zero amount
        if value.quantize(cents, rounding=ROUND_HALF_UP) <= 0:
            raise GateError(
                "G2_PositiveAmount",
                "Amount must be positive.",
                {"amount": str(amount)},
            )

        return value

    @classmethod
    def check_positive_amount(cls, amount) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.positive_amount(amount)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Required Fields
    # =========================================================================

    @classmethod
    def required_fields(cls, fields: dict, required: tuple[str, ...]) -> GateResult:
        """
        G3: Every required field is present and non-blank.

        Args:
            fields: Submitted values
            required: Names that must be filled

        Raises:
            GateError: Listing every missing field
        """
        missing = [
            name for name in required
            if fields.get(name) is None or str(fields.get(name)).strip() == ""
        ]
        if missing:
            raise GateError(
                "G3_RequiredFields",
                f"Missing required fields: {', '.join(missing)}.",
                {"missing": missing},
            )

        return GateResult(True, "G3_RequiredFields")

    # =========================================================================
    # G4: Email Format
    # =========================================================================

    @classmethod
    def email_format(cls, email: str) -> GateResult:
        """
        G4: Email must be syntactically valid.

        Raises:
            GateError: If Django's email validator rejects it
        """
        try:
            validate_email(email)
        except ValidationError:
            raise GateError(
                "G4_EmailFormat",
                "Invalid email address.",
                {"email": email},
            )

        return GateResult(True, "G4_EmailFormat")

    @classmethod
    def check_email_format(cls, email: str) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.email_format(email)
            return True
        except GateError:
            return False

    # =========================================================================
    # G5: Phone Length
    # =========================================================================

    MIN_PHONE_LENGTH = 10

    @classmethod
    def phone_length(cls, phone: str) -> GateResult:
        """
        G5: Phone must carry at least area code + number (10 characters).

        Raises:
            GateError: If the phone is too short
        """
        if len((phone or "").strip()) < cls.MIN_PHONE_LENGTH:
            raise GateError(
                "G5_PhoneLength",
                f"Phone must have at least {cls.MIN_PHONE_LENGTH} characters.",
                {"phone": phone},
            )

        return GateResult(True, "G5_PhoneLength")

    # =========================================================================
    # G6: Birth Date
    # =========================================================================

    @classmethod
    def birth_date(cls, value) -> date:
        """
        G6: Birth date must be a date or an ISO string (YYYY-MM-DD).

        Returns:
            The parsed date

        Raises:
            GateError: If the value cannot be parsed
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        try:
            parsed = parse_date(str(value or "").strip())
        except ValueError:
            parsed = None

        if parsed is None:
            raise GateError(
                "G6_BirthDate",
                "Invalid birth date.",
                {"birth_date": str(value)},
            )

        return parsed
