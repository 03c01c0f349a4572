# finance/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors shared by the receivables, inventory and
finance services. backend.exception_handler maps each one to HTTP.
"""


class LedgerServiceError(Exception):
    """Base exception for all ledger service failures."""


class LedgerValidationError(LedgerServiceError):
    """Malformed or out-of-range input (amount <= 0, amount over outstanding, missing reason)."""


class NotFoundError(LedgerServiceError):
    """Referenced Sale, Customer or Site does not exist."""


class InvalidStateError(LedgerServiceError):
    """Operation attempted against the wrong lifecycle state."""


class ForbiddenError(LedgerServiceError):
    """Caller's role may not perform ledger operations."""
