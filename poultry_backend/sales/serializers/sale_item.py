from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = [
            "id",
            "description",
            "bird_count",
            "weight_kg",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class SaleItemInputSerializer(serializers.Serializer):
    """Priced line as handed over by order entry."""

    description = serializers.CharField(max_length=160)
    bird_count = serializers.IntegerField(min_value=0, required=False, default=0)
    weight_kg = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default="0.00"
    )
    unit_price = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, default="0.00"
    )
    subtotal = serializers.DecimalField(max_digits=16, decimal_places=2, min_value=0)
