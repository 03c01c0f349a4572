# sales/models/sale_item.py

"""
SALE ITEM (LINE SNAPSHOT)

Line items arrive from order entry already priced. The ledger does not
re-validate line arithmetic; it only works with the sale-level totals.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models

from finance.services.exceptions import InvalidStateError

from .sale import Sale


class SaleItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    description = models.CharField(
        max_length=160,
        help_text="Meat cut or bird grade as written on the invoice.",
    )
    bird_count = models.PositiveIntegerField(default=0)
    weight_kg = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    unit_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["description"]

    def save(self, *args, **kwargs):
        if Sale.objects.filter(pk=self.sale_id, is_finalized=True).exists():
            raise InvalidStateError("Line items of a finalized sale cannot be changed.")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.description} | {self.subtotal}"
