# finance/apps.py

"""
FINANCE APP CONFIG

Cash & loss valuation:
- Mortality loss valuation (nearest preceding batch)
- Daily / monthly cash statements

No models of its own; aggregates inventory + sales rows.
"""

from django.apps import AppConfig


class FinanceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "finance"
    verbose_name = "Finance"
