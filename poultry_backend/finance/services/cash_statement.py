# finance/services/cash_statement.py

"""
CASH STATEMENTS (DAILY, MONTHLY, YEARLY; READ-ONLY)

Cash in comes only from actual payment events (PaymentRecord rows keyed by
their own payment_date):
- payments on a sale invoiced the same day are bucketed by sale category
  (that is the sale's same-day paid amount, finalize payment included)
- payments on a sale invoiced on another day are "collections"
The two buckets are disjoint, so no payment is counted twice, and shipment
totals never feed cash in (a shipment and its invoice are one sale).

Cash out for a day:
- incoming batch total_price (bird purchases)
- live + processed shipment deductions
- NOT_CLAIMABLE mortality valued at the nearest preceding batch price

net = cash_in - cash_out.  Empty days are all zeros.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.db.models import F, Sum
from django.utils import timezone

from finance.services.loss_valuation import mortality_loss_by_day
from inventory.models import IncomingBatch, LiveShipment, ProcessedShipment
from inventory.services.stock_reconciliation import month_bounds
from permissions.roles import assert_ledger_access
from sales.models import PaymentRecord, Sale
from sales.services.receivables_report import (
    collections_on,
    new_receivables_on,
    total_active_receivables,
)

ZERO = Decimal("0.00")

CASH_IN_KEYS = ("processed_meat", "live_bird", "collections")
CASH_OUT_KEYS = (
    "bird_purchases",
    "live_shipment_costs",
    "processed_shipment_costs",
    "mortality_loss",
)

_CATEGORY_KEYS = {
    Sale.CATEGORY_PROCESSED_MEAT: "processed_meat",
    Sale.CATEGORY_LIVE_BIRD: "live_bird",
}


# ============================================================
# AGGREGATION HELPERS
# ============================================================


def _days(start: date, end: date):
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def _sum_by_day(qs, date_field: str, amount_field: str) -> dict:
    rows = qs.order_by().values(date_field).annotate(total=Sum(amount_field))
    return {r[date_field]: r["total"] or ZERO for r in rows}


def _daily_flows(start: date, end: date) -> dict[date, dict[str, Decimal]]:
    """{day: {bucket: amount}} for every day in [start, end]."""
    flows = {d: {k: ZERO for k in (*CASH_IN_KEYS, *CASH_OUT_KEYS)} for d in _days(start, end)}

    payments = PaymentRecord.objects.filter(payment_date__gte=start, payment_date__lte=end)

    same_day = (
        payments.filter(sale__transaction_date=F("payment_date"))
        .order_by()
        .values("payment_date", "sale__category")
        .annotate(total=Sum("amount"))
    )
    for row in same_day:
        key = _CATEGORY_KEYS.get(row["sale__category"])
        if key:
            flows[row["payment_date"]][key] += row["total"] or ZERO

    collections = _sum_by_day(
        payments.exclude(sale__transaction_date=F("payment_date")),
        "payment_date",
        "amount",
    )

    purchases = _sum_by_day(
        IncomingBatch.objects.filter(arrival_date__gte=start, arrival_date__lte=end),
        "arrival_date",
        "total_price",
    )
    live_costs = _sum_by_day(
        LiveShipment.objects.filter(date__gte=start, date__lte=end),
        "date",
        "deduction",
    )
    processed_costs = _sum_by_day(
        ProcessedShipment.objects.filter(date__gte=start, date__lte=end),
        "date",
        "deduction",
    )
    losses = mortality_loss_by_day(start, end)

    for bucket, per_day in (
        ("collections", collections),
        ("bird_purchases", purchases),
        ("live_shipment_costs", live_costs),
        ("processed_shipment_costs", processed_costs),
        ("mortality_loss", losses),
    ):
        for day, amount in per_day.items():
            if day in flows:
                flows[day][bucket] += amount

    return flows


def _shape(buckets: dict[str, Decimal]) -> dict:
    cash_in = {k: buckets[k] for k in CASH_IN_KEYS}
    cash_in["total"] = sum(cash_in.values(), ZERO)

    cash_out = {k: buckets[k] for k in CASH_OUT_KEYS}
    cash_out["total"] = sum(cash_out.values(), ZERO)

    return {
        "cash_in": cash_in,
        "cash_out": cash_out,
        "net": cash_in["total"] - cash_out["total"],
    }


def _sum_buckets(flows: dict[date, dict[str, Decimal]]) -> dict[str, Decimal]:
    totals = {k: ZERO for k in (*CASH_IN_KEYS, *CASH_OUT_KEYS)}
    for buckets in flows.values():
        for k, v in buckets.items():
            totals[k] += v
    return totals


def _sales_by_category(start: date, end: date) -> dict:
    """Invoiced totals (informational; not cash)."""
    rows = (
        Sale.objects.filter(
            is_finalized=True,
            transaction_date__gte=start,
            transaction_date__lte=end,
        )
        .order_by()
        .values("category")
        .annotate(total=Sum("grand_total"))
    )
    out = {"processed_meat": ZERO, "live_bird": ZERO}
    for row in rows:
        key = _CATEGORY_KEYS.get(row["category"])
        if key:
            out[key] += row["total"] or ZERO
    out["total"] = out["processed_meat"] + out["live_bird"]
    return out


def _empty_sales() -> dict:
    return {"processed_meat": ZERO, "live_bird": ZERO, "total": ZERO}


# ============================================================
# DAILY
# ============================================================


def daily_cash_statement(*, actor, on_date: date) -> dict:
    assert_ledger_access(actor)

    flows = _daily_flows(on_date, on_date)
    statement = {"date": on_date, **_shape(flows[on_date])}

    statement["sales_today"] = _sales_by_category(on_date, on_date)
    statement["receivables"] = {
        "new": new_receivables_on(on_date),
        "collected": collections_on(on_date),
        "active_total": total_active_receivables(),
    }
    return statement


# ============================================================
# MONTHLY / YEARLY
# ============================================================


def _empty_buckets() -> dict[str, Decimal]:
    return {k: ZERO for k in (*CASH_IN_KEYS, *CASH_OUT_KEYS)}


def _net_row(buckets: dict[str, Decimal], **keys) -> dict:
    shaped = _shape(buckets)
    return {
        **keys,
        "cash_in": shaped["cash_in"]["total"],
        "cash_out": shaped["cash_out"]["total"],
        "net": shaped["net"],
    }


def monthly_cash_statement(
    *,
    actor,
    year: int,
    month: int,
    today: date | None = None,
) -> dict:
    """
    Month totals plus one row per day up to today.
    The month's net always equals the sum of its daily nets.
    """
    assert_ledger_access(actor)

    start, end = month_bounds(year, month)
    today = today or timezone.localdate()

    period = {
        "year": start.year,
        "month": start.month,
        "start_date": start,
        "end_date": end,
    }

    if start > today:
        return {
            "period": period,
            **_shape(_empty_buckets()),
            "sales": _empty_sales(),
            "days": [],
        }

    last_day = min(end, today)
    flows = _daily_flows(start, last_day)

    return {
        "period": period,
        **_shape(_sum_buckets(flows)),
        "sales": _sales_by_category(start, last_day),
        "days": [_net_row(flows[day], date=day) for day in _days(start, last_day)],
    }


def annual_cash_statement(*, actor, year: int, today: date | None = None) -> dict:
    """
    Year totals (same buckets as the daily statement) plus one row per month
    up to today. Month rows include mortality loss, so their nets sum to the
    year net.
    """
    assert_ledger_access(actor)

    start, _ = month_bounds(year, 1)
    _, end = month_bounds(year, 12)
    today = today or timezone.localdate()

    period = {"year": start.year, "start_date": start, "end_date": end}

    if start > today:
        return {
            "period": period,
            **_shape(_empty_buckets()),
            "sales": _empty_sales(),
            "months": [],
        }

    last_day = min(end, today)
    flows = _daily_flows(start, last_day)

    months = []
    for month in range(1, last_day.month + 1):
        month_start, month_end = month_bounds(start.year, month)
        month_end = min(month_end, last_day)
        month_flows = {d: flows[d] for d in _days(month_start, month_end)}
        months.append(
            _net_row(
                _sum_buckets(month_flows),
                month=month,
                start_date=month_start,
                end_date=month_end,
            )
        )

    return {
        "period": period,
        **_shape(_sum_buckets(flows)),
        "sales": _sales_by_category(start, last_day),
        "months": months,
    }
