# finance/services/money.py

"""
Input coercion shared by the ledger services.

Amounts are quantized to 2 dp (ROUND_HALF_UP). Anything that is not a finite
number is a LedgerValidationError, never a raw decimal/int error.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from finance.services.exceptions import LedgerValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(v, *, field: str = "amount") -> Decimal:
    """None / "" count as zero."""
    try:
        d = Decimal(str(v if v not in (None, "") else "0"))
    except (InvalidOperation, ValueError) as exc:
        raise LedgerValidationError(f"{field} must be a number.") from exc

    # NaN survives quantize() and only blows up on the first comparison.
    if not d.is_finite():
        raise LedgerValidationError(f"{field} must be a finite number.")

    try:
        return d.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise LedgerValidationError(f"{field} is too large.") from exc


def to_int(v, *, field: str, minimum: int = 0) -> int:
    if isinstance(v, bool):
        raise LedgerValidationError(f"{field} must be an integer.")
    try:
        n = int(v)
    except (TypeError, ValueError, OverflowError) as exc:
        raise LedgerValidationError(f"{field} must be an integer.") from exc
    if n < minimum:
        if minimum == 1:
            raise LedgerValidationError(f"{field} must be greater than zero.")
        raise LedgerValidationError(f"{field} must be at least {minimum}.")
    return n
