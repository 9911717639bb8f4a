"""CPF helpers (national taxpayer id, used as the client key)."""

import re

CPF_LENGTH = 11

_CPF_GROUPS = re.compile(r"^(\d{3})(\d{3})(\d{3})(\d{2})$")


def normalize_cpf(value: str) -> str:
    """Strip everything but digits."""
    return "".join(filter(str.isdigit, value or ""))


def is_valid_cpf(value: str) -> bool:
    """
    Accept any value with exactly 11 digits after normalization.

    Check digits are not verified.
    """
    return len(normalize_cpf(value)) == CPF_LENGTH


def format_cpf(value: str) -> str:
    """Format 11 digits as 000.000.000-00. Other input is returned unchanged."""
    return _CPF_GROUPS.sub(r"\1.\2.\3-\4", value or "")
