from django.contrib.auth import get_user_model
from rest_framework import serializers

from permissions.roles import effective_capabilities_for

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    can_operate_ledger = serializers.SerializerMethodField()
    capabilities = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "role",
            "can_operate_ledger",
            "capabilities",
        ]
        read_only_fields = fields

    def get_can_operate_ledger(self, obj) -> bool:
        return obj.has_ledger_access

    def get_capabilities(self, obj) -> list[str]:
        return sorted(effective_capabilities_for(obj))
