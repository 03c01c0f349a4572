# sales/models/balance_adjustment_log.py

"""
BALANCE ADJUSTMENT LOG (IMMUTABLE)

Purpose:
- One entry per payment applied after finalize.
- Captures the sale's balances before and after the payment so the whole
  receivable history can be replayed without trusting Sale's cached fields.

Created once. Never updated. Never deleted.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from .payment_record import PaymentRecord
from .sale import Sale

User = settings.AUTH_USER_MODEL


class BalanceAdjustmentLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name="adjustment_logs",
    )
    payment = models.OneToOneField(
        PaymentRecord,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="adjustment_log",
    )

    # ----------------------------
    # Snapshots
    # ----------------------------
    grand_total = models.DecimalField(max_digits=16, decimal_places=2)
    amount_paid_before = models.DecimalField(max_digits=16, decimal_places=2)
    outstanding_before = models.DecimalField(max_digits=16, decimal_places=2)
    amount_paid_after = models.DecimalField(max_digits=16, decimal_places=2)
    outstanding_after = models.DecimalField(max_digits=16, decimal_places=2)

    reason = models.TextField()

    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="balance_adjustments",
    )
    actor_name = models.CharField(
        max_length=160,
        blank=True,
        default="",
        help_text="Actor display name at the time of the change (snapshot).",
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["sale", "created_at"], name="sales_adjlog_sale_created_idx"),
        ]

    @property
    def amount_applied(self) -> Decimal:
        return Decimal(self.amount_paid_after) - Decimal(self.amount_paid_before)

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise RuntimeError("BalanceAdjustmentLog records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise RuntimeError("BalanceAdjustmentLog records cannot be deleted")

    def __str__(self):
        inv = getattr(self.sale, "document_number", None) or str(self.sale_id)
        return f"Adjustment | {inv} | {self.amount_paid_before} -> {self.amount_paid_after}"
