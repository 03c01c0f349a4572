# sales/apps.py

"""
SALES APP CONFIG

Receivables ledger:
- Customers, draft sales, finalized invoices
- Payment records (append-only) + balance adjustment log
- Document number sequence per period
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales & Receivables"
