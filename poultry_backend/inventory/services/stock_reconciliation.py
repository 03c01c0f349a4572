# inventory/services/stock_reconciliation.py

"""
STOCK RECONCILIATION (AUTHORITATIVE, READ-ONLY)

Live-bird stock per site is never stored. It is re-derived every time:

    stock_through(site, d) = Σ incoming[<= d] - Σ mortality[<= d] - Σ live_out[<= d]

RULES:
- READ-ONLY: no writes, ever
- Movement rows are the single source of truth
- Negative totals are reported as-is (they flag a data-entry problem upstream)
- Empty windows produce zeros, never errors
- Every requested site gets a row, even with no movement
"""

from __future__ import annotations

import calendar
import uuid
from datetime import date, timedelta

from django.db.models import Count, Sum
from django.utils import timezone

from finance.services.exceptions import LedgerValidationError, NotFoundError
from inventory.models import IncomingBatch, LiveShipment, MortalityRecord, Site
from permissions.roles import assert_ledger_access


# (model, date field) for each movement stream; sign applied by the caller.
STREAM_INCOMING = (IncomingBatch, "arrival_date")
STREAM_MORTALITY = (MortalityRecord, "date")
STREAM_OUTGOING = (LiveShipment, "date")


# ============================================================
# AGGREGATION HELPERS
# ============================================================


def _per_site_totals(
    stream,
    *,
    site_ids,
    start: date | None = None,
    end: date | None = None,
) -> dict:
    """
    {site_id: (bird_total, row_count)} for one movement stream over a
    closed [start, end] window (either bound optional).
    """
    model, date_field = stream

    qs = model.objects.filter(site_id__in=list(site_ids))
    if start is not None:
        qs = qs.filter(**{f"{date_field}__gte": start})
    if end is not None:
        qs = qs.filter(**{f"{date_field}__lte": end})

    rows = qs.order_by().values("site_id").annotate(
        birds=Sum("bird_count"),
        rows=Count("id"),
    )
    return {r["site_id"]: (int(r["birds"] or 0), int(r["rows"] or 0)) for r in rows}


def _birds(totals: dict, site_id) -> int:
    return totals.get(site_id, (0, 0))[0]


def _rows(totals: dict, site_id) -> int:
    return totals.get(site_id, (0, 0))[1]


def _site_pk(site_or_id) -> uuid.UUID:
    raw = getattr(site_or_id, "id", site_or_id)
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError, AttributeError) as exc:
        raise LedgerValidationError(f"Invalid site id: {raw!r}") from exc


def _resolve_sites(site_id=None) -> list[Site]:
    if site_id:
        site = Site.objects.filter(id=_site_pk(site_id)).first()
        if site is None:
            raise NotFoundError(f"Site {site_id} not found.")
        return [site]
    return list(Site.objects.order_by("name"))


# ============================================================
# POINT-IN-TIME STOCK
# ============================================================


def stock_through(site_id, on_date: date) -> int:
    """
    Cumulative live-bird stock at a site at the end of on_date.
    Dates before any record evaluate to 0.
    """
    site_id = _site_pk(site_id)
    site_ids = [site_id]
    incoming = _per_site_totals(STREAM_INCOMING, site_ids=site_ids, end=on_date)
    mortality = _per_site_totals(STREAM_MORTALITY, site_ids=site_ids, end=on_date)
    outgoing = _per_site_totals(STREAM_OUTGOING, site_ids=site_ids, end=on_date)

    return (
        _birds(incoming, site_id)
        - _birds(mortality, site_id)
        - _birds(outgoing, site_id)
    )


def current_stock(site_id) -> int:
    """Stock across every recorded movement, regardless of date."""
    site_id = _site_pk(site_id)
    site_ids = [site_id]
    incoming = _per_site_totals(STREAM_INCOMING, site_ids=site_ids)
    mortality = _per_site_totals(STREAM_MORTALITY, site_ids=site_ids)
    outgoing = _per_site_totals(STREAM_OUTGOING, site_ids=site_ids)

    return (
        _birds(incoming, site_id)
        - _birds(mortality, site_id)
        - _birds(outgoing, site_id)
    )


def available_stock(site_id, on_date: date) -> int:
    """
    Birds that can still leave a site on on_date.

    Bounded both by what had arrived by that date and by what is left after
    every movement already recorded (including later-dated ones).
    """
    return min(stock_through(site_id, on_date), current_stock(site_id))


# ============================================================
# DAILY REPORT
# ============================================================


def _empty_daily_totals() -> dict:
    return {
        "carry_in": 0,
        "incoming_today": 0,
        "mortality_today": 0,
        "outgoing_today": 0,
        "stock_total": 0,
    }


def daily_stock_report(*, actor, report_date: date, site_id=None) -> dict:
    """
    Per-site daily movement with carry-in:

        carry_in    = stock_through(site, report_date - 1)
        stock_total = carry_in + incoming_today - mortality_today - outgoing_today
    """
    assert_ledger_access(actor)

    sites = _resolve_sites(site_id)
    site_ids = [s.id for s in sites]
    previous_day = report_date - timedelta(days=1)

    carry_incoming = _per_site_totals(STREAM_INCOMING, site_ids=site_ids, end=previous_day)
    carry_mortality = _per_site_totals(STREAM_MORTALITY, site_ids=site_ids, end=previous_day)
    carry_outgoing = _per_site_totals(STREAM_OUTGOING, site_ids=site_ids, end=previous_day)

    day_incoming = _per_site_totals(
        STREAM_INCOMING, site_ids=site_ids, start=report_date, end=report_date
    )
    day_mortality = _per_site_totals(
        STREAM_MORTALITY, site_ids=site_ids, start=report_date, end=report_date
    )
    day_outgoing = _per_site_totals(
        STREAM_OUTGOING, site_ids=site_ids, start=report_date, end=report_date
    )

    rows = []
    total = _empty_daily_totals()

    for site in sites:
        carry_in = (
            _birds(carry_incoming, site.id)
            - _birds(carry_mortality, site.id)
            - _birds(carry_outgoing, site.id)
        )
        incoming_today = _birds(day_incoming, site.id)
        mortality_today = _birds(day_mortality, site.id)
        outgoing_today = _birds(day_outgoing, site.id)

        row = {
            "site_id": str(site.id),
            "site_name": site.name,
            "carry_in": carry_in,
            "incoming_today": incoming_today,
            "mortality_today": mortality_today,
            "outgoing_today": outgoing_today,
            "stock_total": carry_in + incoming_today - mortality_today - outgoing_today,
        }
        rows.append(row)

        for key in total:
            total[key] += row[key]

    return {
        "date": report_date,
        "sites": rows,
        "total": total,
    }


# ============================================================
# MONTHLY REPORT
# ============================================================


def month_bounds(year: int, month: int) -> tuple[date, date]:
    try:
        year = int(year)
        month = int(month)
    except (TypeError, ValueError) as exc:
        raise LedgerValidationError("year and month must be integers.") from exc

    if month < 1 or month > 12:
        raise LedgerValidationError("month must be between 1 and 12.")
    if year < 1 or year > 9999:
        raise LedgerValidationError("year is out of range.")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _empty_monthly_totals() -> dict:
    return {
        "incoming_total": 0,
        "mortality_total": 0,
        "outgoing_total": 0,
        "difference": 0,
    }


def monthly_stock_report(
    *,
    actor,
    year: int,
    month: int,
    site_id=None,
    today: date | None = None,
) -> dict:
    """
    Closed-interval month totals per site:

        difference = incoming_total - mortality_total - outgoing_total

    A month that starts after today returns zeros without touching movements.
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
        return {"period": period, "sites": [], "total": _empty_monthly_totals()}

    sites = _resolve_sites(site_id)
    site_ids = [s.id for s in sites]

    incoming = _per_site_totals(STREAM_INCOMING, site_ids=site_ids, start=start, end=end)
    mortality = _per_site_totals(STREAM_MORTALITY, site_ids=site_ids, start=start, end=end)
    outgoing = _per_site_totals(STREAM_OUTGOING, site_ids=site_ids, start=start, end=end)

    rows = []
    total = _empty_monthly_totals()

    for site in sites:
        incoming_total = _birds(incoming, site.id)
        mortality_total = _birds(mortality, site.id)
        outgoing_total = _birds(outgoing, site.id)

        row = {
            "site_id": str(site.id),
            "site_name": site.name,
            "incoming_total": incoming_total,
            "mortality_total": mortality_total,
            "outgoing_total": outgoing_total,
            "difference": incoming_total - mortality_total - outgoing_total,
            "incoming_count": _rows(incoming, site.id),
            "mortality_count": _rows(mortality, site.id),
            "outgoing_count": _rows(outgoing, site.id),
        }
        rows.append(row)

        for key in total:
            total[key] += row[key]

    return {"period": period, "sites": rows, "total": total}


# ============================================================
# CURRENT STOCK
# ============================================================


def current_stock_report(*, actor, site_id=None) -> dict:
    """Cumulative stock per site across every recorded movement."""
    assert_ledger_access(actor)

    sites = _resolve_sites(site_id)
    site_ids = [s.id for s in sites]

    incoming = _per_site_totals(STREAM_INCOMING, site_ids=site_ids)
    mortality = _per_site_totals(STREAM_MORTALITY, site_ids=site_ids)
    outgoing = _per_site_totals(STREAM_OUTGOING, site_ids=site_ids)

    rows = [
        {
            "site_id": str(site.id),
            "site_name": site.name,
            "stock": (
                _birds(incoming, site.id)
                - _birds(mortality, site.id)
                - _birds(outgoing, site.id)
            ),
        }
        for site in sites
    ]
    return {"sites": rows, "total": sum(r["stock"] for r in rows)}
