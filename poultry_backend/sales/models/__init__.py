# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for the receivables ledger models.
"""

from .balance_adjustment_log import BalanceAdjustmentLog
from .customer import Customer
from .document_sequence import DocumentSequence
from .payment_record import PaymentRecord
from .sale import Sale
from .sale_item import SaleItem

__all__ = [
    "Customer",
    "Sale",
    "SaleItem",
    "PaymentRecord",
    "BalanceAdjustmentLog",
    "DocumentSequence",
]
