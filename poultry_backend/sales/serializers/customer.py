from decimal import Decimal

from django.db.models import Sum
from rest_framework import serializers

from sales.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    outstanding_total = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "phone",
            "address",
            "outstanding_total",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "outstanding_total", "created_at", "updated_at"]

    def get_outstanding_total(self, obj) -> str:
        # Annotated on list/retrieve; computed for freshly written rows.
        value = getattr(obj, "outstanding_total", None)
        if value is None:
            value = obj.sales.filter(is_finalized=True).aggregate(
                total=Sum("outstanding")
            )["total"]
        return str(Decimal(value or 0).quantize(Decimal("0.01")))
