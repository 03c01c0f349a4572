# sales/services/receivables.py

"""
RECEIVABLES LEDGER (DOMAIN-CONTROLLED)

Purpose:
- Finalize a draft sale into a numbered invoice with its initial payment.
- Apply later payments against a finalized sale with an audit trail.
- Settle a customer's open sales oldest-first from one collected amount.

Core rule:
- Sale.amount_paid is never incremented. After every new PaymentRecord the
  sale's totals are recomputed from SUM(PaymentRecord.amount), so any earlier
  drift in the cached fields heals on the next write.

Concurrency:
- Every mutating call runs in one transaction and locks the Sale row
  (SELECT ... FOR UPDATE) before reading the "before" snapshot.
- Any failure rolls back the PaymentRecord, the log entry and the Sale update
  together.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from finance.services.exceptions import (
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
)
from finance.services.money import ZERO, to_money
from permissions.roles import actor_display_name, assert_ledger_access
from sales.models import BalanceAdjustmentLog, Customer, PaymentRecord, Sale
from sales.services.document_numbers import allocate_document_number
from sales.services.sale_lifecycle import derive_status, validate_transition

logger = logging.getLogger("receivables")


def _get_sale_for_update(sale_id) -> Sale:
    try:
        return Sale.objects.select_for_update().get(id=sale_id)
    except (Sale.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Sale {sale_id} not found.") from exc


# ============================================================
# PROJECTION (RECOMPUTE FROM SOURCE ROWS)
# ============================================================


def sum_payments(sale_id) -> Decimal:
    return PaymentRecord.objects.filter(sale_id=sale_id).aggregate(
        total=Coalesce(Sum("amount"), ZERO)
    )["total"]


def recompute_sale_totals(sale: Sale) -> tuple[Decimal, Decimal, str]:
    """
    (amount_paid, outstanding, status) as the payment rows say they should be.

    Pure read. Drafts keep the draft status; they carry no payments.
    """
    amount_paid = to_money(sum_payments(sale.pk))
    outstanding = max(ZERO, to_money(sale.grand_total) - amount_paid)

    if not sale.is_finalized:
        return amount_paid, outstanding, Sale.STATUS_DRAFT

    return amount_paid, outstanding, derive_status(
        outstanding=outstanding, amount_paid=amount_paid
    )


@transaction.atomic
def refresh_sale_projection(*, sale_id, actor) -> Sale:
    """
    Replay the recompute step without a new payment.

    Writes only when the cached fields disagree with the payment rows, so
    replaying on a consistent sale never changes stored totals.
    """
    assert_ledger_access(actor)

    sale = _get_sale_for_update(sale_id)
    amount_paid, outstanding, status = recompute_sale_totals(sale)

    if (
        to_money(sale.amount_paid) == amount_paid
        and to_money(sale.outstanding) == outstanding
        and sale.status == status
    ):
        return sale

    logger.warning(
        "Sale projection drift repaired",
        extra={
            "sale_id": str(sale.id),
            "cached_amount_paid": str(sale.amount_paid),
            "cached_outstanding": str(sale.outstanding),
            "amount_paid": str(amount_paid),
            "outstanding": str(outstanding),
        },
    )
    sale.write_projection(amount_paid=amount_paid, outstanding=outstanding, status=status)
    return sale


# ============================================================
# FINALIZE
# ============================================================


@transaction.atomic
def finalize_sale(*, sale_id, payment_amount, payment_method: str, actor) -> Sale:
    """
    draft -> numbered invoice.

    - allocates PREFIX-YYYYMM-NNN from the sale's transaction month
    - records the initial payment (if any) dated at the transaction date
    - derives status from the recomputed totals
    """
    assert_ledger_access(actor)

    sale = _get_sale_for_update(sale_id)

    if sale.is_finalized or sale.status != Sale.STATUS_DRAFT:
        raise InvalidStateError(
            f"Sale {sale.document_number or sale.id} is already finalized."
        )

    amount = to_money(payment_amount, field="payment_amount")
    grand_total = to_money(sale.grand_total)

    if amount < ZERO or amount > grand_total:
        raise LedgerValidationError(
            f"payment_amount must be between 0 and {grand_total}."
        )

    method = (payment_method or "").strip()
    if amount > ZERO and not method:
        raise LedgerValidationError("payment_method is required when a payment is made.")
    if amount == ZERO:
        method = Sale.METHOD_UNPAID

    logger.info(
        "Finalizing sale",
        extra={
            "sale_id": str(sale.id),
            "payment_amount": str(amount),
            "payment_method": method,
        },
    )

    document_number = allocate_document_number(sale.transaction_date)

    if amount > ZERO:
        PaymentRecord.objects.create(
            customer_id=sale.customer_id,
            sale=sale,
            payment_date=sale.transaction_date,
            amount=amount,
            method=method,
            note=f"Initial payment at finalization {document_number}",
            recorded_by=actor,
        )

    amount_paid = to_money(sum_payments(sale.pk))
    outstanding = max(ZERO, grand_total - amount_paid)
    status = derive_status(outstanding=outstanding, amount_paid=amount_paid)
    validate_transition(sale=sale, target_status=status)

    sale.write_projection(
        amount_paid=amount_paid,
        outstanding=outstanding,
        status=status,
        document_number=document_number,
        is_finalized=True,
        payment_method=method,
        finalized_at=timezone.now(),
    )

    logger.info(
        "Sale finalized",
        extra={
            "sale_id": str(sale.id),
            "document_number": document_number,
            "status": status,
            "outstanding": str(outstanding),
        },
    )
    return sale


# ============================================================
# APPLY PAYMENT
# ============================================================


@transaction.atomic
def apply_payment(
    *,
    sale_id,
    additional_amount,
    method: str,
    reason: str,
    actor,
    payment_date=None,
) -> Sale:
    """
    Append a payment to a finalized sale and log the before/after balances.

    Order matters: lock -> snapshot -> validate against the snapshot ->
    append PaymentRecord -> recompute from SUM -> log -> update Sale.
    """
    assert_ledger_access(actor)

    amount = to_money(additional_amount, field="additional_amount")
    if amount <= ZERO:
        raise LedgerValidationError("additional_amount must be greater than zero.")

    method = (method or "").strip()
    if not method:
        raise LedgerValidationError("method is required.")

    reason = (reason or "").strip()
    if not reason:
        raise LedgerValidationError("reason is required.")

    sale = _get_sale_for_update(sale_id)

    if not sale.is_finalized:
        raise InvalidStateError("Sale must be finalized before payments can be applied.")

    grand_total = to_money(sale.grand_total)
    amount_paid_before = to_money(sale.amount_paid)
    outstanding_before = to_money(sale.outstanding)

    if amount > outstanding_before:
        logger.warning(
            "Payment rejected: exceeds outstanding",
            extra={
                "sale_id": str(sale.id),
                "additional_amount": str(amount),
                "outstanding_before": str(outstanding_before),
            },
        )
        raise LedgerValidationError(
            f"Payment {amount} exceeds outstanding balance {outstanding_before}."
        )

    payment = PaymentRecord.objects.create(
        customer_id=sale.customer_id,
        sale=sale,
        payment_date=payment_date or timezone.localdate(),
        amount=amount,
        method=method,
        note=reason,
        recorded_by=actor,
    )

    amount_paid_after = to_money(sum_payments(sale.pk))
    outstanding_after = max(ZERO, grand_total - amount_paid_after)
    status = derive_status(outstanding=outstanding_after, amount_paid=amount_paid_after)
    validate_transition(sale=sale, target_status=status)

    BalanceAdjustmentLog.objects.create(
        sale=sale,
        payment=payment,
        grand_total=grand_total,
        amount_paid_before=amount_paid_before,
        outstanding_before=outstanding_before,
        amount_paid_after=amount_paid_after,
        outstanding_after=outstanding_after,
        reason=reason,
        actor=actor,
        actor_name=actor_display_name(actor),
    )

    sale.write_projection(
        amount_paid=amount_paid_after,
        outstanding=outstanding_after,
        status=status,
        payment_method=method,
    )

    logger.info(
        "Payment applied",
        extra={
            "sale_id": str(sale.id),
            "document_number": sale.document_number,
            "payment_id": str(payment.id),
            "amount_paid_after": str(amount_paid_after),
            "outstanding_after": str(outstanding_after),
            "status": status,
        },
    )
    return sale


# ============================================================
# CUSTOMER-LEVEL COLLECTION (OLDEST FIRST)
# ============================================================


DEFAULT_COLLECTION_REASON = "Receivable collection"


@transaction.atomic
def collect_customer_payment(
    *,
    customer_id,
    amount,
    method: str,
    actor,
    payment_date=None,
    note: str = "",
) -> dict:
    """
    Spread one collected amount over a customer's open sales, oldest first.

    Each touched sale gets its own PaymentRecord + log entry through
    apply_payment, so per-sale invariants hold exactly as for single payments.
    """
    assert_ledger_access(actor)

    total_amount = to_money(amount)
    if total_amount <= ZERO:
        raise LedgerValidationError("amount must be greater than zero.")

    method = (method or "").strip()
    if not method:
        raise LedgerValidationError("method is required.")

    try:
        customer = Customer.objects.get(id=customer_id)
    except (Customer.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Customer {customer_id} not found.") from exc

    open_sales = list(
        Sale.objects.select_for_update()
        .filter(customer=customer, is_finalized=True, outstanding__gt=ZERO)
        .order_by("transaction_date", "created_at")
    )
    if not open_sales:
        raise LedgerValidationError(f"{customer.name} has no outstanding receivables.")

    total_outstanding = sum((to_money(s.outstanding) for s in open_sales), ZERO)
    if total_amount > total_outstanding:
        raise LedgerValidationError(
            f"Amount {total_amount} exceeds total outstanding {total_outstanding}."
        )

    reason = (note or "").strip() or DEFAULT_COLLECTION_REASON
    remaining = total_amount
    allocations = []

    for open_sale in open_sales:
        if remaining <= ZERO:
            break

        portion = min(remaining, to_money(open_sale.outstanding))
        updated = apply_payment(
            sale_id=open_sale.id,
            additional_amount=portion,
            method=method,
            reason=reason,
            actor=actor,
            payment_date=payment_date,
        )
        remaining -= portion

        allocations.append(
            {
                "sale_id": str(updated.id),
                "document_number": updated.document_number,
                "amount_applied": portion,
                "outstanding_after": updated.outstanding,
                "status": updated.status,
            }
        )

    logger.info(
        "Customer collection applied",
        extra={
            "customer_id": str(customer.id),
            "amount": str(total_amount),
            "sales_touched": len(allocations),
        },
    )

    return {
        "customer_id": str(customer.id),
        "amount": total_amount,
        "allocations": allocations,
        "remaining_outstanding": total_outstanding - total_amount,
    }
