# finance/services/loss_valuation.py

"""
MORTALITY LOSS VALUATION

A NOT_CLAIMABLE death is valued at the price of the nearest preceding
delivery to the same site:

    batch     = latest IncomingBatch at site with arrival_date <= record.date
    unit_kg   = batch.total_weight_kg / batch.bird_count     (0 if no birds)
    loss      = record.bird_count * unit_kg * batch.price_per_kg

CLAIMABLE deaths are expected to be compensated and are worth 0 here.
No reference batch -> 0.

Valuation helpers are pure functions of (site, date): one indexed query
per record, no state.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from finance.services.exceptions import LedgerValidationError
from inventory.models import IncomingBatch, MortalityRecord
from permissions.roles import assert_ledger_access

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def find_reference_batch(site_id, on_date: date) -> IncomingBatch | None:
    return (
        IncomingBatch.objects.filter(site_id=site_id, arrival_date__lte=on_date)
        .order_by("-arrival_date", "-created_at")
        .first()
    )


def mortality_loss_value(record: MortalityRecord) -> Decimal:
    if record.claim_status != MortalityRecord.NOT_CLAIMABLE:
        return ZERO

    batch = find_reference_batch(record.site_id, record.date)
    if batch is None or not batch.bird_count:
        return ZERO

    # Multiply before dividing so the per-bird weight is never rounded.
    loss = (
        Decimal(record.bird_count)
        * Decimal(batch.total_weight_kg)
        * Decimal(batch.price_per_kg)
        / Decimal(batch.bird_count)
    )
    return loss.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def not_claimable_records(start: date, end: date):
    return MortalityRecord.objects.filter(
        date__gte=start,
        date__lte=end,
        claim_status=MortalityRecord.NOT_CLAIMABLE,
    ).order_by("date", "created_at")


def mortality_loss_by_day(start: date, end: date) -> dict[date, Decimal]:
    totals: dict[date, Decimal] = {}
    for record in not_claimable_records(start, end):
        totals[record.date] = totals.get(record.date, ZERO) + mortality_loss_value(record)
    return totals


def mortality_loss_total(start: date, end: date) -> Decimal:
    return sum(mortality_loss_by_day(start, end).values(), ZERO)


def mortality_loss_report(*, actor, start: date, end: date) -> dict:
    """Per-record valuation over [start, end] with the reference batch used."""
    assert_ledger_access(actor)

    if end < start:
        raise LedgerValidationError("date_to must not be before date_from.")

    rows = []
    total = ZERO
    for record in not_claimable_records(start, end).select_related("site"):
        batch = find_reference_batch(record.site_id, record.date)
        value = mortality_loss_value(record)
        total += value
        rows.append(
            {
                "mortality_id": str(record.id),
                "site_id": str(record.site_id),
                "site_name": record.site.name,
                "date": record.date,
                "bird_count": record.bird_count,
                "reference_batch_id": str(batch.id) if batch else None,
                "reference_price_per_kg": batch.price_per_kg if batch else None,
                "loss_value": value,
            }
        )

    return {"date_from": start, "date_to": end, "records": rows, "total": total}
