from .movements import (
    IncomingBatchInputSerializer,
    IncomingBatchSerializer,
    LiveShipmentInputSerializer,
    LiveShipmentSerializer,
    MortalityInputSerializer,
    MortalityRecordSerializer,
    ProcessedShipmentInputSerializer,
    ProcessedShipmentItemSerializer,
    ProcessedShipmentSerializer,
)
from .site import SiteSerializer

__all__ = [
    "SiteSerializer",
    "IncomingBatchSerializer",
    "IncomingBatchInputSerializer",
    "MortalityRecordSerializer",
    "MortalityInputSerializer",
    "LiveShipmentSerializer",
    "LiveShipmentInputSerializer",
    "ProcessedShipmentSerializer",
    "ProcessedShipmentItemSerializer",
    "ProcessedShipmentInputSerializer",
]
