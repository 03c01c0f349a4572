# backend/query_params.py

"""
QUERY PARAM PARSING (REPORT ENDPOINTS)

Contract:
- dates are YYYY-MM-DD
- a missing date defaults to today (server timezone)
- a malformed value is a 400, never a silent fallback
"""

from __future__ import annotations

import uuid
from datetime import date as date_cls
from datetime import datetime

from django.utils import timezone

from finance.services.exceptions import LedgerValidationError


def parse_date_param(request, name: str = "date", *, default_today: bool = True) -> date_cls | None:
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        if default_today:
            return timezone.localdate()
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError as exc:
        raise LedgerValidationError(f"{name} must be YYYY-MM-DD.") from exc


def parse_int_param(request, name: str, *, default: int) -> int:
    raw = (request.query_params.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise LedgerValidationError(f"{name} must be an integer.") from exc


def optional_param(request, name: str) -> str | None:
    return (request.query_params.get(name) or "").strip() or None


def parse_uuid_param(request, name: str) -> uuid.UUID | None:
    raw = optional_param(request, name)
    if raw is None:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError as exc:
        raise LedgerValidationError(f"{name} must be a valid id.") from exc
