# inventory/apps.py

"""
INVENTORY APP CONFIG

Movement store for live birds and processed meat:
- Sites (stock-accounting units)
- Incoming batches, mortality, live + processed shipments
- Cumulative stock reconciliation (never a stored running counter)
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory"
