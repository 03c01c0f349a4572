# sales/services/document_numbers.py

"""
DOCUMENT NUMBER ALLOCATOR

Format: PREFIX-YYYYMM-NNN (e.g. INV-202401-007), scoped to the sale's
transaction month.

RULES:
- Must run inside the caller's atomic block (the finalize transaction).
- The DocumentSequence row for the prefix is locked FOR UPDATE, so
  concurrent allocations for one period are serialised.
- next = max(counter, highest existing suffix) + 1; the counter survives
  sales numbered by older code paths or imports.
- A rolled-back finalize rolls the counter back too: numbers stay gapless.
- Numbers are never reused.
"""

from __future__ import annotations

import logging
from datetime import date

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models.functions import Length

from sales.models import DocumentSequence, Sale

logger = logging.getLogger("documents")


def _prefix_setting() -> str:
    return (getattr(settings, "DOCUMENT_NUMBER_PREFIX", "INV") or "INV").strip()


def _padding_setting() -> int:
    return int(getattr(settings, "DOCUMENT_NUMBER_PADDING", 3) or 3)


def period_prefix(transaction_date: date) -> str:
    return f"{_prefix_setting()}-{transaction_date:%Y%m}-"


def parse_sequence(document_number: str | None, prefix: str) -> int | None:
    """
    Trailing numeric segment of a document number with the given prefix.
    None when it does not share the prefix or the suffix is not a number.
    """
    if not document_number or not document_number.startswith(prefix):
        return None

    suffix = document_number[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def format_document_number(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:0{_padding_setting()}d}"


def _highest_existing(prefix: str) -> int:
    greatest = (
        Sale.objects.filter(document_number__startswith=prefix)
        .order_by(Length("document_number").desc(), "-document_number")
        .values_list("document_number", flat=True)
        .first()
    )
    return parse_sequence(greatest, prefix) or 0


def _lock_sequence(prefix: str) -> DocumentSequence:
    seq = DocumentSequence.objects.select_for_update().filter(prefix=prefix).first()
    if seq is not None:
        return seq

    # First allocation of the period: create the row, tolerating a concurrent creator.
    try:
        with transaction.atomic():
            DocumentSequence.objects.create(prefix=prefix, last_value=0)
    except IntegrityError:
        pass
    return DocumentSequence.objects.select_for_update().get(prefix=prefix)


def allocate_document_number(period: date | str) -> str:
    """
    Allocate the next number for a period.

    period: the sale's transaction date, or an already built "PREFIX-YYYYMM-" key.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("allocate_document_number must run inside transaction.atomic")

    prefix = period if isinstance(period, str) else period_prefix(period)

    seq = _lock_sequence(prefix)
    next_value = max(seq.last_value, _highest_existing(prefix)) + 1

    seq.last_value = next_value
    seq.save(update_fields=["last_value", "updated_at"])

    number = format_document_number(prefix, next_value)
    logger.info(
        "Document number allocated",
        extra={"prefix": prefix, "document_number": number},
    )
    return number
