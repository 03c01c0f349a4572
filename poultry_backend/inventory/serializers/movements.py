# inventory/serializers/movements.py

"""
MOVEMENT SERIALIZERS

Read serializers are read-only snapshots of stored rows.
Input serializers only shape the request; quantity / price rules and the
stock check live in inventory.services.movements.
"""

from rest_framework import serializers

from inventory.models import (
    IncomingBatch,
    LiveShipment,
    MortalityRecord,
    ProcessedShipment,
    ProcessedShipmentItem,
)


# ==========================================================
# READ
# ==========================================================


class IncomingBatchSerializer(serializers.ModelSerializer):
    site_name = serializers.CharField(source="site.name", read_only=True)

    class Meta:
        model = IncomingBatch
        fields = [
            "id",
            "site",
            "site_name",
            "arrival_date",
            "cage_label",
            "bird_count",
            "total_weight_kg",
            "price_per_kg",
            "total_price",
            "amount_transferred",
            "supplier_balance",
            "note",
            "created_at",
        ]
        read_only_fields = fields


class MortalityRecordSerializer(serializers.ModelSerializer):
    site_name = serializers.CharField(source="site.name", read_only=True)

    class Meta:
        model = MortalityRecord
        fields = [
            "id",
            "site",
            "site_name",
            "date",
            "bird_count",
            "claim_status",
            "note",
            "created_at",
        ]
        read_only_fields = fields


class LiveShipmentSerializer(serializers.ModelSerializer):
    site_name = serializers.CharField(source="site.name", read_only=True)

    class Meta:
        model = LiveShipment
        fields = [
            "id",
            "site",
            "site_name",
            "date",
            "customer_name",
            "bird_count",
            "total_weight_kg",
            "grade",
            "price_per_kg",
            "is_dressed",
            "dressing_fee_per_bird",
            "sale_amount",
            "deduction",
            "net_amount",
            "note",
            "created_at",
        ]
        read_only_fields = fields


class ProcessedShipmentItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProcessedShipmentItem
        fields = ["id", "meat_type", "weight_kg", "price_per_kg", "subtotal"]
        read_only_fields = fields


class ProcessedShipmentSerializer(serializers.ModelSerializer):
    items = ProcessedShipmentItemSerializer(many=True, read_only=True)

    class Meta:
        model = ProcessedShipment
        fields = [
            "id",
            "date",
            "customer_name",
            "sale_amount",
            "deduction",
            "net_amount",
            "note",
            "items",
            "created_at",
        ]
        read_only_fields = fields


# ==========================================================
# INPUT
# ==========================================================


class IncomingBatchInputSerializer(serializers.Serializer):
    site_id = serializers.UUIDField()
    arrival_date = serializers.DateField()
    cage_label = serializers.CharField(required=False, allow_blank=True, default="")
    bird_count = serializers.IntegerField()
    total_weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_price = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, allow_null=True, default=None
    )
    amount_transferred = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, default="0.00"
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class MortalityInputSerializer(serializers.Serializer):
    site_id = serializers.UUIDField()
    date = serializers.DateField()
    bird_count = serializers.IntegerField()
    claim_status = serializers.ChoiceField(
        choices=MortalityRecord.CLAIM_STATUS_CHOICES,
        required=False,
        default=MortalityRecord.NOT_CLAIMABLE,
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class LiveShipmentInputSerializer(serializers.Serializer):
    site_id = serializers.UUIDField()
    date = serializers.DateField()
    customer_name = serializers.CharField(max_length=160)
    bird_count = serializers.IntegerField()
    total_weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2)
    grade = serializers.ChoiceField(
        choices=LiveShipment.GRADE_CHOICES,
        required=False,
        default=LiveShipment.GRADE_LARGE,
    )
    deduction = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, default="0.00"
    )
    is_dressed = serializers.BooleanField(required=False, default=False)
    dressing_fee_per_bird = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default="0.00"
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class ProcessedItemInputSerializer(serializers.Serializer):
    meat_type = serializers.CharField(max_length=80)
    weight_kg = serializers.DecimalField(max_digits=12, decimal_places=2)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2)


class ProcessedShipmentInputSerializer(serializers.Serializer):
    date = serializers.DateField()
    customer_name = serializers.CharField(max_length=160)
    items = ProcessedItemInputSerializer(many=True, allow_empty=False)
    deduction = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, default="0.00"
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")
