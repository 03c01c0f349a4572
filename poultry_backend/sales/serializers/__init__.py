from .customer import CustomerSerializer
from .sale import (
    ApplyPaymentInputSerializer,
    BalanceAdjustmentLogSerializer,
    CollectPaymentInputSerializer,
    DraftSaleInputSerializer,
    FinalizeSaleInputSerializer,
    PaymentRecordSerializer,
    SaleDetailSerializer,
    SaleSerializer,
)
from .sale_item import SaleItemInputSerializer, SaleItemSerializer

__all__ = [
    "CustomerSerializer",
    "SaleSerializer",
    "SaleDetailSerializer",
    "SaleItemSerializer",
    "SaleItemInputSerializer",
    "PaymentRecordSerializer",
    "BalanceAdjustmentLogSerializer",
    "DraftSaleInputSerializer",
    "FinalizeSaleInputSerializer",
    "ApplyPaymentInputSerializer",
    "CollectPaymentInputSerializer",
]
