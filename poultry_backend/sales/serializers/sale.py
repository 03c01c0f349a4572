# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import BalanceAdjustmentLog, PaymentRecord, Sale

from .sale_item import SaleItemInputSerializer, SaleItemSerializer


class PaymentRecordSerializer(serializers.ModelSerializer):
    """Append-only payment events (read-only)."""

    recorded_by_email = serializers.SerializerMethodField()

    class Meta:
        model = PaymentRecord
        fields = [
            "id",
            "sale",
            "customer",
            "payment_date",
            "amount",
            "method",
            "note",
            "recorded_by_email",
            "created_at",
        ]
        read_only_fields = fields

    def get_recorded_by_email(self, obj):
        user = getattr(obj, "recorded_by", None)
        return getattr(user, "email", None)


class BalanceAdjustmentLogSerializer(serializers.ModelSerializer):
    amount_applied = serializers.DecimalField(
        max_digits=16, decimal_places=2, read_only=True
    )

    class Meta:
        model = BalanceAdjustmentLog
        fields = [
            "id",
            "payment",
            "grand_total",
            "amount_paid_before",
            "outstanding_before",
            "amount_paid_after",
            "outstanding_after",
            "amount_applied",
            "reason",
            "actor_name",
            "created_at",
        ]
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """
    CANONICAL SALE SERIALIZER (READ-ONLY)

    Used for the sales list. amount_paid / outstanding / status are the
    cached projection of the sale's payment records.
    """

    customer_name = serializers.CharField(source="customer.name", read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id",
            "document_number",
            "customer",
            "customer_name",
            "transaction_date",
            "category",
            "gross_amount",
            "deduction_amount",
            "grand_total",
            "amount_paid",
            "outstanding",
            "status",
            "is_finalized",
            "payment_method",
            "note",
            "finalized_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SaleDetailSerializer(SaleSerializer):
    """Invoice view: sale + lines + payment history + adjustment log."""

    items = SaleItemSerializer(many=True, read_only=True)
    payments = PaymentRecordSerializer(many=True, read_only=True)
    adjustment_logs = BalanceAdjustmentLogSerializer(many=True, read_only=True)

    class Meta(SaleSerializer.Meta):
        fields = SaleSerializer.Meta.fields + ["items", "payments", "adjustment_logs"]
        read_only_fields = fields


# ==========================================================
# COMMAND INPUTS
# ==========================================================


class DraftSaleInputSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    transaction_date = serializers.DateField()
    category = serializers.ChoiceField(choices=Sale.CATEGORY_CHOICES)
    items = SaleItemInputSerializer(many=True, allow_empty=False)
    deduction_amount = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, default="0.00"
    )
    note = serializers.CharField(required=False, allow_blank=True, default="")


class FinalizeSaleInputSerializer(serializers.Serializer):
    payment_amount = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, default="0.00"
    )
    payment_method = serializers.CharField(
        max_length=32, required=False, allow_blank=True, default=""
    )


class ApplyPaymentInputSerializer(serializers.Serializer):
    additional_amount = serializers.DecimalField(max_digits=16, decimal_places=2)
    method = serializers.CharField(max_length=32)
    reason = serializers.CharField()
    payment_date = serializers.DateField(required=False, allow_null=True, default=None)


class CollectPaymentInputSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=16, decimal_places=2)
    method = serializers.CharField(max_length=32)
    payment_date = serializers.DateField(required=False, allow_null=True, default=None)
    note = serializers.CharField(required=False, allow_blank=True, default="")
