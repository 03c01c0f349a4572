# inventory/services/movements.py

"""
MOVEMENT RECORDING (APPLICATION SERVICE)

Purpose:
- Single entry point for writing movement rows (incoming, mortality,
  live shipment, processed shipment).
- Validate quantities and prices before anything is written.
- Live shipments may not take a site's stock below zero.

Rules:
- Every write is atomic.
- The site row is locked while a live shipment checks availability, so two
  concurrent shipments from one site cannot both pass the check.
- Movement rows are never updated here; stock is derived, not stored.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from finance.services.exceptions import LedgerValidationError, NotFoundError
from finance.services.money import ZERO, to_int, to_money
from inventory.models import (
    IncomingBatch,
    LiveShipment,
    MortalityRecord,
    ProcessedShipment,
    ProcessedShipmentItem,
    Site,
)
from inventory.services.stock_reconciliation import available_stock
from permissions.roles import assert_ledger_access

logger = logging.getLogger("inventory")


def _positive_money(v, *, field: str) -> Decimal:
    amt = to_money(v, field=field)
    if amt <= ZERO:
        raise LedgerValidationError(f"{field} must be greater than zero.")
    return amt


def _non_negative_money(v, *, field: str) -> Decimal:
    amt = to_money(v, field=field)
    if amt < ZERO:
        raise LedgerValidationError(f"{field} must be zero or more.")
    return amt


def _require_date(v, *, field: str):
    if not v:
        raise LedgerValidationError(f"{field} is required.")
    return v


def _get_site(site_id, *, lock: bool = False) -> Site:
    qs = Site.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(id=site_id)
    except (Site.DoesNotExist, ValueError, DjangoValidationError) as exc:
        raise NotFoundError(f"Site {site_id} not found.") from exc


# ============================================================
# SITES
# ============================================================


@transaction.atomic
def create_site(*, actor, name: str, address: str = "") -> Site:
    assert_ledger_access(actor)

    name = (name or "").strip()
    if not name:
        raise LedgerValidationError("Site name is required.")
    if Site.objects.filter(name__iexact=name).exists():
        raise LedgerValidationError(f"Site '{name}' already exists.")

    site = Site.objects.create(name=name, address=(address or "").strip())
    logger.info("Site created", extra={"site_id": str(site.id), "site_name": name})
    return site


# ============================================================
# INCOMING
# ============================================================


@transaction.atomic
def record_incoming_batch(
    *,
    actor,
    site_id,
    arrival_date,
    bird_count,
    total_weight_kg,
    price_per_kg,
    cage_label: str = "",
    amount_transferred=None,
    total_price=None,
    note: str = "",
) -> IncomingBatch:
    assert_ledger_access(actor)

    site = _get_site(site_id)
    arrival_date = _require_date(arrival_date, field="arrival_date")
    birds = to_int(bird_count, field="bird_count", minimum=1)
    weight = _positive_money(total_weight_kg, field="total_weight_kg")
    price = _non_negative_money(price_per_kg, field="price_per_kg")
    transferred = _non_negative_money(amount_transferred, field="amount_transferred")

    total = None
    if total_price not in (None, ""):
        total = _non_negative_money(total_price, field="total_price")

    batch = IncomingBatch(
        site=site,
        arrival_date=arrival_date,
        cage_label=(cage_label or "").strip(),
        bird_count=birds,
        total_weight_kg=weight,
        price_per_kg=price,
        amount_transferred=transferred,
        note=note or "",
    )
    if total is not None:
        batch.total_price = total
    batch.save()

    logger.info(
        "Incoming batch recorded",
        extra={
            "batch_id": str(batch.id),
            "site_id": str(site.id),
            "arrival_date": str(arrival_date),
            "bird_count": birds,
            "total_price": str(batch.total_price),
        },
    )
    return batch


# ============================================================
# MORTALITY
# ============================================================


@transaction.atomic
def record_mortality(
    *,
    actor,
    site_id,
    date,
    bird_count,
    claim_status: str = MortalityRecord.NOT_CLAIMABLE,
    note: str = "",
) -> MortalityRecord:
    assert_ledger_access(actor)

    site = _get_site(site_id)
    date = _require_date(date, field="date")
    birds = to_int(bird_count, field="bird_count", minimum=1)

    status = (claim_status or "").strip().upper()
    if status not in {MortalityRecord.CLAIMABLE, MortalityRecord.NOT_CLAIMABLE}:
        raise LedgerValidationError(
            "claim_status must be CLAIMABLE or NOT_CLAIMABLE."
        )

    record = MortalityRecord.objects.create(
        site=site,
        date=date,
        bird_count=birds,
        claim_status=status,
        note=note or "",
    )

    logger.info(
        "Mortality recorded",
        extra={
            "mortality_id": str(record.id),
            "site_id": str(site.id),
            "date": str(date),
            "bird_count": birds,
            "claim_status": status,
        },
    )
    return record


# ============================================================
# LIVE SHIPMENT
# ============================================================


@transaction.atomic
def record_live_shipment(
    *,
    actor,
    site_id,
    date,
    customer_name: str,
    bird_count,
    total_weight_kg,
    price_per_kg,
    grade: str = LiveShipment.GRADE_LARGE,
    deduction=None,
    is_dressed: bool = False,
    dressing_fee_per_bird=None,
    note: str = "",
) -> LiveShipment:
    assert_ledger_access(actor)

    site = _get_site(site_id, lock=True)
    date = _require_date(date, field="date")

    customer_name = (customer_name or "").strip()
    if not customer_name:
        raise LedgerValidationError("customer_name is required.")

    birds = to_int(bird_count, field="bird_count", minimum=1)
    weight = _positive_money(total_weight_kg, field="total_weight_kg")
    price = _non_negative_money(price_per_kg, field="price_per_kg")
    deduction_amt = _non_negative_money(deduction, field="deduction")
    fee = _non_negative_money(dressing_fee_per_bird, field="dressing_fee_per_bird")

    grade = (grade or "").strip().upper()
    if grade not in {c for c, _ in LiveShipment.GRADE_CHOICES}:
        raise LedgerValidationError("grade must be JUMBO, LARGE or SMALL.")

    available = available_stock(site.id, date)
    if birds > available:
        logger.warning(
            "Live shipment rejected: insufficient stock",
            extra={
                "site_id": str(site.id),
                "date": str(date),
                "requested": birds,
                "available": available,
            },
        )
        raise LedgerValidationError(
            f"Insufficient stock at {site.name}: requested {birds}, available {max(available, 0)}."
        )

    shipment = LiveShipment.objects.create(
        site=site,
        date=date,
        customer_name=customer_name,
        bird_count=birds,
        total_weight_kg=weight,
        grade=grade,
        price_per_kg=price,
        is_dressed=bool(is_dressed),
        dressing_fee_per_bird=fee if is_dressed else ZERO,
        deduction=deduction_amt,
        note=note or "",
    )

    logger.info(
        "Live shipment recorded",
        extra={
            "shipment_id": str(shipment.id),
            "site_id": str(site.id),
            "date": str(date),
            "bird_count": birds,
            "sale_amount": str(shipment.sale_amount),
            "net_amount": str(shipment.net_amount),
        },
    )
    return shipment


# ============================================================
# PROCESSED SHIPMENT
# ============================================================


@transaction.atomic
def record_processed_shipment(
    *,
    actor,
    date,
    customer_name: str,
    items,
    deduction=None,
    note: str = "",
) -> ProcessedShipment:
    """
    items: iterable of {"meat_type", "weight_kg", "price_per_kg"}.
    """
    assert_ledger_access(actor)

    date = _require_date(date, field="date")
    customer_name = (customer_name or "").strip()
    if not customer_name:
        raise LedgerValidationError("customer_name is required.")

    items = list(items or [])
    if not items:
        raise LedgerValidationError("At least one item is required.")

    deduction_amt = _non_negative_money(deduction, field="deduction")

    cleaned = []
    for idx, item in enumerate(items, start=1):
        meat_type = (item.get("meat_type") or "").strip()
        if not meat_type:
            raise LedgerValidationError(f"Item {idx}: meat_type is required.")
        cleaned.append(
            (
                meat_type,
                _positive_money(item.get("weight_kg"), field=f"Item {idx} weight_kg"),
                _non_negative_money(item.get("price_per_kg"), field=f"Item {idx} price_per_kg"),
            )
        )

    shipment = ProcessedShipment.objects.create(
        date=date,
        customer_name=customer_name,
        deduction=deduction_amt,
        note=note or "",
    )

    for meat_type, weight, price in cleaned:
        ProcessedShipmentItem.objects.create(
            shipment=shipment,
            meat_type=meat_type,
            weight_kg=weight,
            price_per_kg=price,
        )

    shipment.refresh_totals()

    logger.info(
        "Processed shipment recorded",
        extra={
            "shipment_id": str(shipment.id),
            "date": str(date),
            "items": len(cleaned),
            "sale_amount": str(shipment.sale_amount),
            "net_amount": str(shipment.net_amount),
        },
    )
    return shipment
