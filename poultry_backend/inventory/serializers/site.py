from rest_framework import serializers

from inventory.models import Site
from inventory.services.stock_reconciliation import current_stock


class SiteSerializer(serializers.ModelSerializer):
    """
    Site + its live-bird stock, derived from movements on every read.
    """

    current_stock = serializers.SerializerMethodField()

    class Meta:
        model = Site
        fields = ["id", "name", "address", "current_stock", "created_at"]
        read_only_fields = ["id", "current_stock", "created_at"]

    def get_current_stock(self, obj) -> int:
        return current_stock(obj.id)
