# sales/models/sale.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

from finance.services.exceptions import InvalidStateError

from .customer import Customer

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    The receivable unit: a customer-facing invoice and its payment state.

    GUARANTEES:
    - grand_total = gross_amount - deduction_amount, never negative
    - amount_paid / outstanding / status are a cached projection of the
      sale's PaymentRecords; they can only be written through
      write_projection() (receivables service), never by a plain save()
    - document_number is assigned once, at finalize, and never changes
    - once finalized, the invoice body (customer, date, amounts) is frozen

    LIFECYCLE:
    - draft -> (finalize) -> partial | debt | paid
    - partial | debt -> (payment) -> partial | paid
    - never back to draft
    """

    STATUS_DRAFT = "draft"
    STATUS_PARTIAL = "partial"
    STATUS_DEBT = "debt"
    STATUS_PAID = "paid"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PARTIAL, "Partially paid"),
        (STATUS_DEBT, "Unpaid"),
        (STATUS_PAID, "Paid"),
    ]

    CATEGORY_PROCESSED_MEAT = "PROCESSED_MEAT"
    CATEGORY_LIVE_BIRD = "LIVE_BIRD"

    CATEGORY_CHOICES = [
        (CATEGORY_PROCESSED_MEAT, "Processed meat"),
        (CATEGORY_LIVE_BIRD, "Live bird"),
    ]

    METHOD_UNPAID = "UNPAID"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    document_number = models.CharField(
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        help_text="PREFIX-YYYYMM-NNN, assigned at finalize.",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="sales",
    )

    transaction_date = models.DateField()
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    gross_amount = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal("0.00")
    )
    deduction_amount = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Operational deduction (transport, shrinkage, etc.).",
    )
    grand_total = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal("0.00")
    )

    # ----------------------------
    # Cached projection of PaymentRecord rows
    # ----------------------------
    amount_paid = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal("0.00")
    )
    outstanding = models.DecimalField(
        max_digits=16, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
    )

    is_finalized = models.BooleanField(
        default=False,
        help_text="Printed / finalized invoice. Set exactly once.",
    )
    payment_method = models.CharField(max_length=32, blank=True, default="")

    note = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_created",
    )

    finalized_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transaction_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(grand_total__gte=Decimal("0.00")),
                name="sale_grand_total_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(amount_paid__gte=Decimal("0.00")),
                name="sale_amount_paid_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(outstanding__gte=Decimal("0.00")),
                name="sale_outstanding_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["transaction_date"], name="sales_sale_txn_date_idx"),
            models.Index(fields=["status"], name="sales_sale_status_idx"),
            models.Index(fields=["customer", "status"], name="sales_sale_customer_status_idx"),
        ]

    _PROJECTION_FIELDS = ("amount_paid", "outstanding", "status")

    _IMMUTABLE_FIELDS_AFTER_FINALIZE = (
        "document_number",
        "customer_id",
        "transaction_date",
        "category",
        "gross_amount",
        "deduction_amount",
        "grand_total",
        "finalized_at",
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._projection_write = False

    # ======================================================
    # DERIVED VALUES
    # ======================================================

    def compute_grand_total(self) -> Decimal:
        return Decimal(self.gross_amount or 0) - Decimal(self.deduction_amount or 0)

    @property
    def is_draft(self) -> bool:
        return self.status == self.STATUS_DRAFT

    # ======================================================
    # WRITE GUARDS
    # ======================================================

    def _validate_new(self):
        if self.status != self.STATUS_DRAFT or self.is_finalized or self.document_number:
            raise InvalidStateError("Sales are created as drafts; use finalize to number them.")
        if Decimal(self.amount_paid or 0) != Decimal("0.00"):
            raise InvalidStateError("A new sale cannot carry payments; record PaymentRecords instead.")

    def _validate_update(self, previous: "Sale"):
        if not self._projection_write:
            for field in self._PROJECTION_FIELDS:
                if getattr(self, field) != getattr(previous, field):
                    raise InvalidStateError(
                        f"Sale.{field} is derived from payment records and cannot be written directly."
                    )

        if previous.is_finalized:
            if not self.is_finalized:
                raise InvalidStateError("A finalized sale cannot return to draft.")
            for field in self._IMMUTABLE_FIELDS_AFTER_FINALIZE:
                if getattr(self, field) != getattr(previous, field):
                    raise InvalidStateError(
                        f"Sale is finalized. Field '{field}' cannot be changed."
                    )

    def save(self, *args, **kwargs):
        if self._state.adding:
            self._validate_new()
        else:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_update(previous)

        if not self.is_finalized:
            self.grand_total = self.compute_grand_total()
            if self.grand_total < Decimal("0.00"):
                raise InvalidStateError("Deduction cannot exceed the gross amount.")
            if self.status == self.STATUS_DRAFT:
                self.outstanding = self.grand_total

        super().save(*args, **kwargs)

    def write_projection(self, *, amount_paid, outstanding, status, **fields):
        """
        The only write path for the cached payment projection.

        Extra keyword fields (document_number, is_finalized, ...) are saved in
        the same UPDATE so finalize lands as one row change.
        """
        self.amount_paid = amount_paid
        self.outstanding = outstanding
        self.status = status
        for name, value in fields.items():
            setattr(self, name, value)

        update_fields = [*self._PROJECTION_FIELDS, *fields.keys(), "updated_at"]

        self._projection_write = True
        try:
            self.save(update_fields=update_fields)
        finally:
            self._projection_write = False

    def delete(self, *args, **kwargs):
        if self.is_finalized:
            raise InvalidStateError("Finalized sales cannot be deleted.")
        return super().delete(*args, **kwargs)

    def __str__(self):
        return f"{self.document_number or 'DRAFT'} | {self.grand_total}"
