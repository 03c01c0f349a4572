# inventory/models/shipments.py

"""
OUTGOING SHIPMENTS (LIVE + PROCESSED)

Physical / commercial dispatch events. Distinct from sales.Sale, which
carries the customer-facing invoice and payment state; the two are not
linked by key.

Rules:
- Created once; read-only afterwards.
- net_amount = sale_amount - deduction (deduction is an operational cost,
  counted as cash out on the shipment date).
- Live shipments reduce the site's cumulative bird stock.
- Processed shipments carry meat line items and are keyed by customer only.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.db import models

from .site import Site

TWOPLACES = Decimal("0.01")


def _q2(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class LiveShipment(models.Model):
    GRADE_JUMBO = "JUMBO"
    GRADE_LARGE = "LARGE"
    GRADE_SMALL = "SMALL"

    GRADE_CHOICES = [
        (GRADE_JUMBO, "Jumbo"),
        (GRADE_LARGE, "Large"),
        (GRADE_SMALL, "Small"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    site = models.ForeignKey(
        Site,
        on_delete=models.PROTECT,
        related_name="live_shipments",
    )

    date = models.DateField()
    customer_name = models.CharField(max_length=160)

    bird_count = models.PositiveIntegerField()
    total_weight_kg = models.DecimalField(max_digits=12, decimal_places=2)
    grade = models.CharField(max_length=8, choices=GRADE_CHOICES, default=GRADE_LARGE)
    price_per_kg = models.DecimalField(max_digits=14, decimal_places=2)

    is_dressed = models.BooleanField(
        default=False,
        help_text="Birds were slaughtered/plucked for the customer (per-bird fee).",
    )
    dressing_fee_per_bird = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    sale_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    deduction = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    net_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))

    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(bird_count__gt=0),
                name="live_shipment_bird_count_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(deduction__gte=Decimal("0.00")),
                name="live_shipment_deduction_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["site", "date"], name="inv_live_site_date_idx"),
            models.Index(fields=["date"], name="inv_live_date_idx"),
        ]

    def compute_amounts(self) -> None:
        sale = Decimal(self.total_weight_kg) * Decimal(self.price_per_kg)
        if self.is_dressed:
            sale += Decimal(self.dressing_fee_per_bird or 0) * Decimal(self.bird_count)

        self.sale_amount = _q2(sale)
        self.net_amount = self.sale_amount - _q2(self.deduction)

    def save(self, *args, **kwargs):
        self.compute_amounts()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.site} -> {self.customer_name} | {self.date} | {self.bird_count} birds"


class ProcessedShipment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField()
    customer_name = models.CharField(max_length=160)

    sale_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    deduction = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))
    net_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))

    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(deduction__gte=Decimal("0.00")),
                name="processed_shipment_deduction_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["date"], name="inv_processed_date_idx"),
        ]

    def refresh_totals(self) -> None:
        """Re-derive sale/net amounts from the stored items."""
        total = sum(
            (Decimal(i.subtotal) for i in self.items.all()),
            Decimal("0.00"),
        )
        self.sale_amount = _q2(total)
        self.net_amount = self.sale_amount - _q2(self.deduction)
        self.save(update_fields=["sale_amount", "net_amount"])

    def __str__(self):
        return f"{self.customer_name} | {self.date} | {self.sale_amount}"


class ProcessedShipmentItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    shipment = models.ForeignKey(
        ProcessedShipment,
        on_delete=models.CASCADE,
        related_name="items",
    )

    meat_type = models.CharField(max_length=80)
    weight_kg = models.DecimalField(max_digits=12, decimal_places=2)
    price_per_kg = models.DecimalField(max_digits=14, decimal_places=2)
    subtotal = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["meat_type"]

    def save(self, *args, **kwargs):
        self.subtotal = _q2(Decimal(self.weight_kg) * Decimal(self.price_per_kg))
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.meat_type} {self.weight_kg}kg"
