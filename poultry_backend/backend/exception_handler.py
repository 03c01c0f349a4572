# backend/exception_handler.py

"""
PATH: backend/exception_handler.py

API EXCEPTION HANDLER

Maps ledger service errors onto HTTP:
- LedgerValidationError -> 400
- NotFoundError         -> 404
- ForbiddenError        -> 403
- InvalidStateError     -> 409

DRF's own exceptions keep their default rendering.
Anything else (including DatabaseError) is logged server-side and
surfaced as a generic 500 without internal detail.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from finance.services.exceptions import (
    ForbiddenError,
    InvalidStateError,
    LedgerServiceError,
    LedgerValidationError,
    NotFoundError,
)

logger = logging.getLogger("api")


_STATUS_BY_ERROR = (
    (LedgerValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidStateError, status.HTTP_409_CONFLICT),
)


def status_for_ledger_error(exc: LedgerServiceError) -> int:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_400_BAD_REQUEST


def ledger_exception_handler(exc, context):
    if isinstance(exc, LedgerServiceError):
        code = status_for_ledger_error(exc)
        view = context.get("view")
        logger.warning(
            "Ledger operation rejected",
            extra={
                "error": exc.__class__.__name__,
                "view": view.__class__.__name__ if view else None,
                "status_code": code,
            },
        )
        return Response({"detail": str(exc)}, status=code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    logger.exception(
        "Unhandled API error",
        extra={"view": view.__class__.__name__ if view else None},
    )
    return Response(
        {"detail": "Internal server error."},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
