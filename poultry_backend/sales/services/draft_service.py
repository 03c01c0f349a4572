# sales/services/draft_service.py

"""
DRAFT SALES (ORDER ENTRY SURFACE)

Order entry hands the ledger priced line items. The ledger trusts the line
arithmetic and only derives the sale-level totals:

    gross_amount = Σ item subtotals
    grand_total  = gross_amount - deduction_amount   (must stay >= 0)

A draft has no document number and no payments; outstanding = grand_total.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from finance.services.exceptions import LedgerValidationError, NotFoundError
from finance.services.money import ZERO, to_int, to_money
from permissions.roles import assert_ledger_access
from sales.models import Customer, Sale, SaleItem

logger = logging.getLogger("receivables")

VALID_CATEGORIES = {c for c, _ in Sale.CATEGORY_CHOICES}


def draft_sales():
    return (
        Sale.objects.filter(status=Sale.STATUS_DRAFT, is_finalized=False)
        .select_related("customer")
        .order_by("-transaction_date", "-created_at")
    )


def count_draft_sales() -> int:
    return draft_sales().count()


@transaction.atomic
def create_draft_sale(
    *,
    actor,
    customer_id,
    transaction_date,
    category: str,
    items,
    deduction_amount=None,
    note: str = "",
) -> Sale:
    """
    items: iterable of {"description", "bird_count", "weight_kg", "unit_price", "subtotal"}.
    """
    assert_ledger_access(actor)

    try:
        customer = Customer.objects.get(id=customer_id)
    except (Customer.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Customer {customer_id} not found.") from exc

    if not transaction_date:
        raise LedgerValidationError("transaction_date is required.")

    category = (category or "").strip().upper()
    if category not in VALID_CATEGORIES:
        raise LedgerValidationError("category must be PROCESSED_MEAT or LIVE_BIRD.")

    items = list(items or [])
    if not items:
        raise LedgerValidationError("At least one line item is required.")

    lines = []
    for idx, item in enumerate(items, start=1):
        description = (item.get("description") or "").strip()
        if not description:
            raise LedgerValidationError(f"Item {idx}: description is required.")

        subtotal = to_money(item.get("subtotal"), field=f"Item {idx} subtotal")
        if subtotal < ZERO:
            raise LedgerValidationError(f"Item {idx}: subtotal must be zero or more.")

        lines.append(
            {
                "description": description,
                "bird_count": to_int(
                    item.get("bird_count") or 0, field=f"Item {idx} bird_count"
                ),
                "weight_kg": to_money(item.get("weight_kg"), field=f"Item {idx} weight_kg"),
                "unit_price": to_money(item.get("unit_price"), field=f"Item {idx} unit_price"),
                "subtotal": subtotal,
            }
        )

    gross = sum((line["subtotal"] for line in lines), ZERO)
    deduction = to_money(deduction_amount, field="deduction_amount")

    if deduction < ZERO:
        raise LedgerValidationError("deduction_amount must be zero or more.")
    if deduction > gross:
        raise LedgerValidationError("deduction_amount cannot exceed the gross amount.")

    sale = Sale.objects.create(
        customer=customer,
        transaction_date=transaction_date,
        category=category,
        gross_amount=gross,
        deduction_amount=deduction,
        note=note or "",
        created_by=actor,
    )

    SaleItem.objects.bulk_create([SaleItem(sale=sale, **line) for line in lines])

    logger.info(
        "Draft sale created",
        extra={
            "sale_id": str(sale.id),
            "customer_id": str(customer.id),
            "grand_total": str(sale.grand_total),
            "items": len(lines),
        },
    )
    return sale
