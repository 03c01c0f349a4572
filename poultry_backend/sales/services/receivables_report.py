# sales/services/receivables_report.py

"""
RECEIVABLES SUMMARY (READ-ONLY)

RULES:
- READ-ONLY: no writes, ever
- Only finalized sales are receivables (drafts are order entry, not debt)
- Per-customer rows sorted by outstanding, largest first
- Day figures (new receivables, collections) come from sale and payment dates
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Count, F, Min, Sum
from django.db.models.functions import Coalesce

from permissions.roles import assert_ledger_access
from sales.models import PaymentRecord, Sale

ZERO = Decimal("0.00")


def total_active_receivables() -> Decimal:
    return Sale.objects.filter(is_finalized=True).aggregate(
        total=Coalesce(Sum("outstanding"), ZERO)
    )["total"]


def new_receivables_on(on_date: date) -> Decimal:
    """Outstanding left on sales invoiced that day."""
    return Sale.objects.filter(is_finalized=True, transaction_date=on_date).aggregate(
        total=Coalesce(Sum("outstanding"), ZERO)
    )["total"]


def collections_on(on_date: date) -> Decimal:
    """Payments received that day on sales invoiced on an earlier day."""
    return (
        PaymentRecord.objects.filter(payment_date=on_date)
        .exclude(sale__transaction_date=F("payment_date"))
        .aggregate(total=Coalesce(Sum("amount"), ZERO))["total"]
    )


def receivables_summary(*, actor, on_date: date | None = None) -> dict:
    assert_ledger_access(actor)

    rows = (
        Sale.objects.filter(is_finalized=True, outstanding__gt=ZERO)
        .order_by()
        .values("customer_id", "customer__name")
        .annotate(
            outstanding=Sum("outstanding"),
            grand_total=Sum("grand_total"),
            amount_paid=Sum("amount_paid"),
            open_sales=Count("id"),
            oldest_sale_date=Min("transaction_date"),
        )
        .order_by("-outstanding", "customer__name")
    )

    customers = [
        {
            "customer_id": str(r["customer_id"]),
            "customer_name": r["customer__name"],
            "outstanding": r["outstanding"] or ZERO,
            "grand_total": r["grand_total"] or ZERO,
            "amount_paid": r["amount_paid"] or ZERO,
            "open_sales": r["open_sales"],
            "oldest_sale_date": r["oldest_sale_date"],
        }
        for r in rows
    ]

    summary = {
        "total_outstanding": total_active_receivables(),
        "customers": customers,
    }

    if on_date is not None:
        summary["date"] = on_date
        summary["new_receivables"] = new_receivables_on(on_date)
        summary["collections"] = collections_on(on_date)

    return summary
