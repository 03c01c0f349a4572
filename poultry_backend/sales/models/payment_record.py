# sales/models/payment_record.py

"""
PAYMENT RECORD (APPEND-ONLY)

One row per payment event, including the initial payment captured at
finalize. The authoritative source for how much has been paid on a sale:

    Sale.amount_paid == SUM(PaymentRecord.amount WHERE sale = X)

Created once. Never updated. Never deleted.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from .customer import Customer
from .sale import Sale

User = settings.AUTH_USER_MODEL


class PaymentRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name="payments",
    )

    payment_date = models.DateField()
    amount = models.DecimalField(max_digits=16, decimal_places=2)
    method = models.CharField(max_length=32)
    note = models.TextField(blank=True, default="")

    recorded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_records",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["payment_date", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="payment_record_amount_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["sale", "payment_date"], name="sales_payment_sale_date_idx"),
            models.Index(fields=["payment_date"], name="sales_payment_date_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("PaymentRecord rows are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("PaymentRecord rows cannot be deleted")

    def __str__(self):
        return f"{self.payment_date} | {self.amount} ({self.method})"
