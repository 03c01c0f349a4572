# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (LEDGER OPERATORS)

Purpose:
- Sales history: list + retrieve with filters.
- Order entry: create / list / count drafts.
- Finalize a draft into a numbered invoice (with initial payment).
- Apply a later payment to a finalized sale.
- Replay the payment projection for a single sale.

Security:
- Requires IsAuthenticated
- Requires CAP_LEDGER_OPERATE (admin, owner)
- Services re-check the role themselves

Errors:
- Service errors propagate to backend.exception_handler
  (400 / 404 / 409 / 403).
======================================================
"""

from __future__ import annotations

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import CAP_LEDGER_OPERATE, HasCapability
from sales.models import Sale
from sales.serializers import (
    ApplyPaymentInputSerializer,
    DraftSaleInputSerializer,
    FinalizeSaleInputSerializer,
    SaleDetailSerializer,
    SaleSerializer,
)
from sales.services.draft_service import (
    count_draft_sales,
    create_draft_sale,
    draft_sales,
)
from sales.services.receivables import (
    apply_payment,
    finalize_sale,
    refresh_sale_projection,
)


# ==========================================================
# FILTERS
# ==========================================================


class SaleFilter(filters.FilterSet):
    customer = filters.UUIDFilter(field_name="customer_id")
    date_from = filters.DateFilter(field_name="transaction_date", lookup_expr="gte")
    date_to = filters.DateFilter(field_name="transaction_date", lookup_expr="lte")
    q = filters.CharFilter(field_name="document_number", lookup_expr="icontains")
    outstanding_only = filters.BooleanFilter(method="filter_outstanding_only")

    class Meta:
        model = Sale
        fields = ["status", "category", "is_finalized"]

    def filter_outstanding_only(self, queryset, name, value):
        if value:
            return queryset.filter(is_finalized=True, outstanding__gt=0)
        return queryset


# ==========================================================
# VIEWSET
# ==========================================================


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_OPERATE
    filterset_class = SaleFilter
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_serializer_class(self):
        if self.action == "retrieve":
            return SaleDetailSerializer
        return SaleSerializer

    def get_queryset(self):
        qs = Sale.objects.select_related("customer").order_by(
            "-transaction_date", "-created_at"
        )
        if self.action == "retrieve":
            qs = qs.prefetch_related("items", "payments", "adjustment_logs")
        return qs

    def _detail_response(self, sale: Sale, *, code=status.HTTP_200_OK) -> Response:
        fresh = self.get_queryset().prefetch_related(
            "items", "payments", "adjustment_logs"
        ).get(pk=sale.pk)
        return Response(SaleDetailSerializer(fresh).data, status=code)

    # ======================================================
    # DRAFTS (ORDER ENTRY)
    # ======================================================

    @extend_schema(
        request=DraftSaleInputSerializer,
        responses={200: SaleSerializer(many=True), 201: SaleDetailSerializer},
    )
    @action(detail=False, methods=["get", "post"], url_path="drafts")
    def drafts(self, request):
        if request.method == "GET":
            page = self.paginate_queryset(draft_sales())
            if page is not None:
                return self.get_paginated_response(SaleSerializer(page, many=True).data)
            return Response(SaleSerializer(draft_sales(), many=True).data)

        serializer = DraftSaleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        sale = create_draft_sale(
            actor=request.user,
            customer_id=data["customer_id"],
            transaction_date=data["transaction_date"],
            category=data["category"],
            items=data["items"],
            deduction_amount=data.get("deduction_amount"),
            note=data.get("note", ""),
        )
        return self._detail_response(sale, code=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: OpenApiResponse(description="{\"count\": <int>}")},
    )
    @action(detail=False, methods=["get"], url_path="drafts/count")
    def drafts_count(self, request):
        return Response({"count": count_draft_sales()})

    # ======================================================
    # FINALIZE
    # ======================================================

    @extend_schema(
        request=FinalizeSaleInputSerializer,
        responses={200: SaleDetailSerializer},
        description="Assign the document number and record the initial payment.",
    )
    @action(detail=True, methods=["post"], url_path="finalize")
    def finalize(self, request, pk=None):
        serializer = FinalizeSaleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        sale = finalize_sale(
            sale_id=pk,
            payment_amount=serializer.validated_data["payment_amount"],
            payment_method=serializer.validated_data["payment_method"],
            actor=request.user,
        )
        return self._detail_response(sale)

    # ======================================================
    # PAYMENTS
    # ======================================================

    @extend_schema(
        request=ApplyPaymentInputSerializer,
        responses={200: SaleDetailSerializer},
        description="Append a payment to a finalized sale (logged with before/after balances).",
    )
    @action(detail=True, methods=["post"], url_path="payments")
    def payments(self, request, pk=None):
        serializer = ApplyPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        sale = apply_payment(
            sale_id=pk,
            additional_amount=data["additional_amount"],
            method=data["method"],
            reason=data["reason"],
            actor=request.user,
            payment_date=data.get("payment_date"),
        )
        return self._detail_response(sale)

    @extend_schema(
        request=None,
        responses={200: SaleDetailSerializer},
        description="Recompute amount_paid / outstanding / status from payment records.",
    )
    @action(detail=True, methods=["post"], url_path="refresh")
    def refresh(self, request, pk=None):
        sale = refresh_sale_projection(sale_id=pk, actor=request.user)
        return self._detail_response(sale)
