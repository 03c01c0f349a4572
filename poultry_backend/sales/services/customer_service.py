# sales/services/customer_service.py

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from finance.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from permissions.roles import assert_ledger_access
from sales.models import Customer, Sale

logger = logging.getLogger("receivables")


def _get_customer(customer_id, *, lock: bool = False) -> Customer:
    qs = Customer.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(id=customer_id)
    except (Customer.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Customer {customer_id} not found.") from exc


@transaction.atomic
def create_customer(*, actor, name: str, phone: str = "", address: str = "") -> Customer:
    assert_ledger_access(actor)

    name = (name or "").strip()
    if not name:
        raise LedgerValidationError("Customer name is required.")

    customer = Customer.objects.create(
        name=name,
        phone=(phone or "").strip(),
        address=(address or "").strip(),
    )
    logger.info("Customer created", extra={"customer_id": str(customer.id)})
    return customer


@transaction.atomic
def update_customer(*, actor, customer_id, **changes) -> Customer:
    assert_ledger_access(actor)

    customer = _get_customer(customer_id, lock=True)

    for field in ("name", "phone", "address"):
        if field in changes and changes[field] is not None:
            setattr(customer, field, (changes[field] or "").strip())

    if not customer.name:
        raise LedgerValidationError("Customer name is required.")

    customer.save()
    return customer


@transaction.atomic
def delete_customer(*, actor, customer_id) -> None:
    """
    Blocked while any of the customer's sales still has an outstanding balance.
    Settled history stays; the FK is PROTECT, so a customer with any sale at
    all is kept and only fully unused customers can be removed.
    """
    assert_ledger_access(actor)

    customer = _get_customer(customer_id, lock=True)

    open_sales = Sale.objects.filter(customer=customer, outstanding__gt=Decimal("0.00"))
    if open_sales.exists():
        logger.warning(
            "Customer delete blocked: outstanding receivables",
            extra={"customer_id": str(customer.id), "open_sales": open_sales.count()},
        )
        raise InvalidStateError(
            f"{customer.name} still has outstanding receivables and cannot be deleted."
        )

    if Sale.objects.filter(customer=customer).exists():
        raise InvalidStateError(
            f"{customer.name} has sales history and cannot be deleted."
        )

    customer.delete()
    logger.info("Customer deleted", extra={"customer_id": str(customer_id)})
