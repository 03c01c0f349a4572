"""
======================================================
PATH: sales/migrations/0001_initial.py
======================================================
MIGRATION: CREATE RECEIVABLES LEDGER TABLES

Purpose:
- Customer, Sale (+ SaleItem), append-only PaymentRecord,
  immutable BalanceAdjustmentLog, DocumentSequence counter rows.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # --------------------------------------------------
        # CUSTOMER
        # --------------------------------------------------
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=160)),
                ("phone", models.CharField(blank=True, default="", max_length=40)),
                ("address", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="sales_customer_name_idx"),
                ],
            },
        ),
        # --------------------------------------------------
        # SALE
        # --------------------------------------------------
        migrations.CreateModel(
            name="Sale",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "document_number",
                    models.CharField(
                        blank=True,
                        help_text="PREFIX-YYYYMM-NNN, assigned at finalize.",
                        max_length=32,
                        null=True,
                        unique=True,
                    ),
                ),
                ("transaction_date", models.DateField()),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("PROCESSED_MEAT", "Processed meat"),
                            ("LIVE_BIRD", "Live bird"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "gross_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "deduction_amount",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Operational deduction (transport, shrinkage, etc.).",
                        max_digits=16,
                    ),
                ),
                (
                    "grand_total",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "amount_paid",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "outstanding",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("partial", "Partially paid"),
                            ("debt", "Unpaid"),
                            ("paid", "Paid"),
                        ],
                        default="draft",
                        max_length=16,
                    ),
                ),
                (
                    "is_finalized",
                    models.BooleanField(
                        default=False,
                        help_text="Printed / finalized invoice. Set exactly once.",
                    ),
                ),
                ("payment_method", models.CharField(blank=True, default="", max_length=32)),
                ("note", models.TextField(blank=True, default="")),
                ("finalized_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="sales",
                        to="sales.customer",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sales_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-transaction_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["transaction_date"], name="sales_sale_txn_date_idx"),
                    models.Index(fields=["status"], name="sales_sale_status_idx"),
                    models.Index(
                        fields=["customer", "status"],
                        name="sales_sale_customer_status_idx",
                    ),
                ],
                "constraints": [
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
                ],
            },
        ),
        # --------------------------------------------------
        # SALE ITEM
        # --------------------------------------------------
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "description",
                    models.CharField(
                        help_text="Meat cut or bird grade as written on the invoice.",
                        max_length=160,
                    ),
                ),
                ("bird_count", models.PositiveIntegerField(default=0)),
                (
                    "weight_kg",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "unit_price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14),
                ),
                (
                    "subtotal",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["description"],
            },
        ),
        # --------------------------------------------------
        # PAYMENT RECORD (APPEND-ONLY)
        # --------------------------------------------------
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("payment_date", models.DateField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=16)),
                ("method", models.CharField(max_length=32)),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="sales.customer",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="sales.sale",
                    ),
                ),
                (
                    "recorded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["payment_date", "created_at"],
                "indexes": [
                    models.Index(
                        fields=["sale", "payment_date"],
                        name="sales_payment_sale_date_idx",
                    ),
                    models.Index(fields=["payment_date"], name="sales_payment_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(amount__gt=Decimal("0.00")),
                        name="payment_record_amount_positive",
                    ),
                ],
            },
        ),
        # --------------------------------------------------
        # BALANCE ADJUSTMENT LOG (IMMUTABLE)
        # --------------------------------------------------
        migrations.CreateModel(
            name="BalanceAdjustmentLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("grand_total", models.DecimalField(decimal_places=2, max_digits=16)),
                ("amount_paid_before", models.DecimalField(decimal_places=2, max_digits=16)),
                ("outstanding_before", models.DecimalField(decimal_places=2, max_digits=16)),
                ("amount_paid_after", models.DecimalField(decimal_places=2, max_digits=16)),
                ("outstanding_after", models.DecimalField(decimal_places=2, max_digits=16)),
                ("reason", models.TextField()),
                (
                    "actor_name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Actor display name at the time of the change (snapshot).",
                        max_length=160,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustment_logs",
                        to="sales.sale",
                    ),
                ),
                (
                    "payment",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="adjustment_log",
                        to="sales.paymentrecord",
                    ),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="balance_adjustments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["sale", "created_at"],
                        name="sales_adjlog_sale_created_idx",
                    ),
                ],
            },
        ),
        # --------------------------------------------------
        # DOCUMENT SEQUENCE
        # --------------------------------------------------
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("prefix", models.CharField(max_length=32, unique=True)),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["prefix"],
            },
        ),
    ]
