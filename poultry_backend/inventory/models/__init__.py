# inventory/models/__init__.py

"""
INVENTORY MODELS PACKAGE EXPORTS
"""

from .incoming_batch import IncomingBatch
from .mortality_record import MortalityRecord
from .shipments import LiveShipment, ProcessedShipment, ProcessedShipmentItem
from .site import Site

__all__ = [
    "Site",
    "IncomingBatch",
    "MortalityRecord",
    "LiveShipment",
    "ProcessedShipment",
    "ProcessedShipmentItem",
]
