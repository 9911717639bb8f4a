"""Client service - registration, lookup and profile edits.

The CPF is the primary key and cannot be changed. The stamp balance is
owned by the ledger and is never touched here.
"""

import logging

from django.db import IntegrityError, transaction

from carimbo.exceptions import CarimboError
from carimbo.gates import Gates
from carimbo.models import Client
from carimbo.signals import client_registered, client_updated
from carimbo.utils import normalize_cpf

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("cpf", "name", "phone", "email", "birth_date")

PROFILE_FIELDS = {
    "phone",
    "email",
    "birth_date",
}


def get(cpf: str) -> Client | None:
    """Get client by CPF, formatted (000.000.000-00) or digits only."""
    key = normalize_cpf(cpf)
    if not key:
        return None
    try:
        return Client.objects.get(pk=key)
    except Client.DoesNotExist:
        return None


def search_by_name(term: str, limit: int = 10) -> list[Client]:
    """Case-insensitive name search. Blank terms return nothing."""
    if not term or not term.strip():
        return []
    return list(Client.objects.filter(name__icontains=term.strip())[:limit])


def list_all() -> list[Client]:
    """Every client, by name."""
    return list(Client.objects.all())


def register(
    cpf: str,
    name: str,
    phone: str,
    email: str,
    birth_date=None,
) -> Client:
    """
    Register a new client with an empty stamp card.

    Raises:
        GateError: Invalid CPF, missing field, bad email/phone/birth date
        CarimboError: CLIENT_ALREADY_EXISTS
    """
    Gates.required_fields(
        {"cpf": cpf, "name": name, "phone": phone, "email": email, "birth_date": birth_date},
        REQUIRED_FIELDS,
    )
    Gates.cpf_format(cpf)
    Gates.phone_length(phone)
    Gates.email_format(email)
    parsed_birth_date = Gates.birth_date(birth_date)

    key = normalize_cpf(cpf)
    try:
        with transaction.atomic():
            client = Client.objects.create(
                cpf=key,
                name=name.strip(),
                phone=phone.strip(),
                email=email,
                birth_date=parsed_birth_date,
                current_stamps=0,
            )
    except IntegrityError:
        if Client.objects.filter(pk=key).exists():
            raise CarimboError("CLIENT_ALREADY_EXISTS", cpf=key)
        raise

    logger.info("Client %s registered", key)
    client_registered.send(sender=Client, client=client)
    return client


def update_profile(cpf: str, **fields) -> Client:
    """
    Edit a client's contact data.

    Only phone, email and birth_date are applied; other keys are ignored.

    Raises:
        GateError: Invalid phone, email or birth date
        CarimboError: CLIENT_NOT_FOUND
    """
    client = get(cpf)
    if not client:
        raise CarimboError("CLIENT_NOT_FOUND", cpf=normalize_cpf(cpf))

    updates = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
    if "phone" in updates:
        Gates.phone_length(updates["phone"])
        updates["phone"] = updates["phone"].strip()
    if "email" in updates:
        Gates.email_format(updates["email"])
        updates["email"] = updates["email"].lower().strip()
    if "birth_date" in updates:
        updates["birth_date"] = Gates.birth_date(updates["birth_date"])

    changes = {}
    for key, value in updates.items():
        old_value = getattr(client, key)
        if old_value != value:
            changes[key] = {"old": old_value, "new": value}
        setattr(client, key, value)

    client.save(update_fields=[*updates, "updated_at"])
    if changes:
        client_updated.send(sender=Client, client=client, changes=changes)
    return client
