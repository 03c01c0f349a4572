# sales/api/viewsets/customer.py

"""
CUSTOMER VIEWSET

CRUD over the customer master. Writes go through
sales.services.customer_service so the delete guard (no outstanding
receivables) is enforced in one place.
"""

from __future__ import annotations

from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from permissions.roles import CAP_CUSTOMERS_MANAGE, HasCapability
from sales.models import Customer
from sales.serializers import CustomerSerializer
from sales.services.customer_service import (
    create_customer,
    delete_customer,
    update_customer,
)


class CustomerViewSet(viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CUSTOMERS_MANAGE

    def get_queryset(self):
        qs = Customer.objects.annotate(
            outstanding_total=Coalesce(
                Sum(
                    "sales__outstanding",
                    filter=Q(sales__is_finalized=True),
                ),
                Value(0),
                output_field=DecimalField(max_digits=16, decimal_places=2),
            )
        ).order_by("name")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(phone__icontains=q))
        return qs

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = create_customer(
            actor=self.request.user,
            name=data.get("name", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
        )

    def perform_update(self, serializer):
        serializer.instance = update_customer(
            actor=self.request.user,
            customer_id=serializer.instance.pk,
            **serializer.validated_data,
        )

    @extend_schema(description="Blocked (409) while the customer has outstanding receivables.")
    def destroy(self, request, *args, **kwargs):
        return super().destroy(request, *args, **kwargs)

    def perform_destroy(self, instance):
        delete_customer(actor=self.request.user, customer_id=instance.pk)
