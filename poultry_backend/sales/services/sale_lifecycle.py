"""
SALE LIFECYCLE DOMAIN RULES

Status derivation and the only allowed lifecycle transitions
for Sale entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Status is always derived from (outstanding, amount_paid), never chosen
"""

from __future__ import annotations

from decimal import Decimal

from finance.services.exceptions import InvalidStateError
from sales.models import Sale

# ============================================================
# DOMAIN ERRORS
# ============================================================


class InvalidSaleTransitionError(InvalidStateError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Sale.STATUS_PAID,
}

ALLOWED_TRANSITIONS = {
    Sale.STATUS_DRAFT: {
        Sale.STATUS_PARTIAL,
        Sale.STATUS_DEBT,
        Sale.STATUS_PAID,
    },
    Sale.STATUS_DEBT: {
        Sale.STATUS_DEBT,
        Sale.STATUS_PARTIAL,
        Sale.STATUS_PAID,
    },
    Sale.STATUS_PARTIAL: {
        Sale.STATUS_PARTIAL,
        Sale.STATUS_PAID,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def derive_status(*, outstanding, amount_paid) -> str:
    """
    paid    if outstanding <= 0
    partial if amount_paid > 0
    debt    otherwise
    """
    if Decimal(outstanding) <= Decimal("0"):
        return Sale.STATUS_PAID
    if Decimal(amount_paid) > Decimal("0"):
        return Sale.STATUS_PARTIAL
    return Sale.STATUS_DEBT


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, sale: Sale, target_status: str):
    if not can_transition(
        from_status=sale.status,
        to_status=target_status,
    ):
        raise InvalidSaleTransitionError(
            f"Sale {sale.id} cannot transition from "
            f"'{sale.status}' to '{target_status}'"
        )
