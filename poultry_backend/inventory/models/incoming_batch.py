# inventory/models/incoming_batch.py

"""
INCOMING BATCH (STOCK PURCHASE EVENT)

One row per delivery of live birds into a site.

Rules:
- Created once; read-only afterwards (corrections go through admin).
- total_price defaults to total_weight_kg * price_per_kg.
- supplier_balance = total_price - amount_transferred (what we still owe).
- Also the price reference for mortality loss valuation
  (nearest preceding batch at the same site).
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.db import models

from .site import Site

TWOPLACES = Decimal("0.01")


class IncomingBatch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    site = models.ForeignKey(
        Site,
        on_delete=models.PROTECT,
        related_name="incoming_batches",
    )

    arrival_date = models.DateField()
    cage_label = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text="Cage / lot label written on the delivery note.",
    )

    bird_count = models.PositiveIntegerField()
    total_weight_kg = models.DecimalField(max_digits=12, decimal_places=2)
    price_per_kg = models.DecimalField(max_digits=14, decimal_places=2)

    total_price = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal("0.00")
    )
    amount_transferred = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Amount already transferred to the supplier.",
    )
    supplier_balance = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Still owed to the supplier (total_price - amount_transferred).",
    )

    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-arrival_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_weight_kg__gte=Decimal("0.00")),
                name="incoming_batch_weight_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_kg__gte=Decimal("0.00")),
                name="incoming_batch_price_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=Decimal("0.00")),
                name="incoming_batch_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["site", "arrival_date"], name="inv_batch_site_date_idx"),
            models.Index(fields=["arrival_date"], name="inv_batch_date_idx"),
        ]

    @property
    def unit_weight_kg(self) -> Decimal:
        if not self.bird_count:
            return Decimal("0")
        return Decimal(self.total_weight_kg) / Decimal(self.bird_count)

    def save(self, *args, **kwargs):
        if self._state.adding and not self.total_price:
            self.total_price = (
                Decimal(self.total_weight_kg) * Decimal(self.price_per_kg)
            ).quantize(TWOPLACES, rounding=ROUND_HALF_UP)

        self.supplier_balance = Decimal(self.total_price or 0) - Decimal(
            self.amount_transferred or 0
        )
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.site} | {self.arrival_date} | {self.bird_count} birds"
