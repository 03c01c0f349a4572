"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: CREATE MOVEMENT STORE TABLES

Purpose:
- Site, IncomingBatch, MortalityRecord, LiveShipment,
  ProcessedShipment (+ items).
- (site, date) indexes back the cumulative stock queries.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


def _uuid_pk():
    return (
        "id",
        models.UUIDField(
            default=uuid.uuid4,
            editable=False,
            primary_key=True,
            serialize=False,
        ),
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        # --------------------------------------------------
        # SITE
        # --------------------------------------------------
        migrations.CreateModel(
            name="Site",
            fields=[
                _uuid_pk(),
                ("name", models.CharField(max_length=120, unique=True)),
                ("address", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        # --------------------------------------------------
        # INCOMING BATCH
        # --------------------------------------------------
        migrations.CreateModel(
            name="IncomingBatch",
            fields=[
                _uuid_pk(),
                ("arrival_date", models.DateField()),
                (
                    "cage_label",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Cage / lot label written on the delivery note.",
                        max_length=64,
                    ),
                ),
                ("bird_count", models.PositiveIntegerField()),
                ("total_weight_kg", models.DecimalField(decimal_places=2, max_digits=12)),
                ("price_per_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "total_price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "amount_transferred",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Amount already transferred to the supplier.",
                        max_digits=16,
                    ),
                ),
                (
                    "supplier_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Still owed to the supplier (total_price - amount_transferred).",
                        max_digits=16,
                    ),
                ),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "site",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_batches",
                        to="inventory.site",
                    ),
                ),
            ],
            options={
                "ordering": ["-arrival_date", "-created_at"],
                "indexes": [
                    models.Index(
                        fields=["site", "arrival_date"],
                        name="inv_batch_site_date_idx",
                    ),
                    models.Index(fields=["arrival_date"], name="inv_batch_date_idx"),
                ],
                "constraints": [
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
                ],
            },
        ),
        # --------------------------------------------------
        # MORTALITY
        # --------------------------------------------------
        migrations.CreateModel(
            name="MortalityRecord",
            fields=[
                _uuid_pk(),
                ("date", models.DateField()),
                ("bird_count", models.PositiveIntegerField()),
                (
                    "claim_status",
                    models.CharField(
                        choices=[
                            ("CLAIMABLE", "Claimable"),
                            ("NOT_CLAIMABLE", "Not claimable"),
                        ],
                        default="NOT_CLAIMABLE",
                        max_length=16,
                    ),
                ),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "site",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mortality_records",
                        to="inventory.site",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["site", "date"], name="inv_mortality_site_date_idx"),
                    models.Index(
                        fields=["date", "claim_status"],
                        name="inv_mortality_date_claim_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(bird_count__gt=0),
                        name="mortality_bird_count_positive",
                    ),
                ],
            },
        ),
        # --------------------------------------------------
        # LIVE SHIPMENT
        # --------------------------------------------------
        migrations.CreateModel(
            name="LiveShipment",
            fields=[
                _uuid_pk(),
                ("date", models.DateField()),
                ("customer_name", models.CharField(max_length=160)),
                ("bird_count", models.PositiveIntegerField()),
                ("total_weight_kg", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "grade",
                    models.CharField(
                        choices=[("JUMBO", "Jumbo"), ("LARGE", "Large"), ("SMALL", "Small")],
                        default="LARGE",
                        max_length=8,
                    ),
                ),
                ("price_per_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "is_dressed",
                    models.BooleanField(
                        default=False,
                        help_text="Birds were slaughtered/plucked for the customer (per-bird fee).",
                    ),
                ),
                (
                    "dressing_fee_per_bird",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12),
                ),
                (
                    "sale_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "deduction",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "net_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "site",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="live_shipments",
                        to="inventory.site",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["site", "date"], name="inv_live_site_date_idx"),
                    models.Index(fields=["date"], name="inv_live_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(bird_count__gt=0),
                        name="live_shipment_bird_count_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(deduction__gte=Decimal("0.00")),
                        name="live_shipment_deduction_nonnegative",
                    ),
                ],
            },
        ),
        # --------------------------------------------------
        # PROCESSED SHIPMENT (+ ITEMS)
        # --------------------------------------------------
        migrations.CreateModel(
            name="ProcessedShipment",
            fields=[
                _uuid_pk(),
                ("date", models.DateField()),
                ("customer_name", models.CharField(max_length=160)),
                (
                    "sale_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "deduction",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "net_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                ("note", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["date"], name="inv_processed_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(deduction__gte=Decimal("0.00")),
                        name="processed_shipment_deduction_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProcessedShipmentItem",
            fields=[
                _uuid_pk(),
                ("meat_type", models.CharField(max_length=80)),
                ("weight_kg", models.DecimalField(decimal_places=2, max_digits=12)),
                ("price_per_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "subtotal",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=16),
                ),
                (
                    "shipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="inventory.processedshipment",
                    ),
                ),
            ],
            options={
                "ordering": ["meat_type"],
            },
        ),
    ]
