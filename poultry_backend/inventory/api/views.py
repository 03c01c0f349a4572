# inventory/api/views.py

"""
======================================================
PATH: inventory/api/views.py
======================================================
INVENTORY API (MOVEMENTS + STOCK REPORTS)

Movements:
- Sites: list / retrieve / create
- Incoming batches, mortality, live + processed shipments:
  list (?site_id, ?date_from, ?date_to) and create

Reports (read-only):
- GET /stock/daily/?date=YYYY-MM-DD&site_id=
- GET /stock/monthly/?year=&month=&site_id=
- GET /stock/current/?site_id=

Security:
- Movements need CAP_INVENTORY_RECORD, reports CAP_LEDGER_REPORT;
  services re-check the role.
======================================================
"""

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.query_params import (
    optional_param,
    parse_date_param,
    parse_int_param,
    parse_uuid_param,
)
from inventory.models import (
    IncomingBatch,
    LiveShipment,
    MortalityRecord,
    ProcessedShipment,
    Site,
)
from inventory.serializers import (
    IncomingBatchInputSerializer,
    IncomingBatchSerializer,
    LiveShipmentInputSerializer,
    LiveShipmentSerializer,
    MortalityInputSerializer,
    MortalityRecordSerializer,
    ProcessedShipmentInputSerializer,
    ProcessedShipmentSerializer,
    SiteSerializer,
)
from inventory.services.movements import (
    create_site,
    record_incoming_batch,
    record_live_shipment,
    record_mortality,
    record_processed_shipment,
)
from inventory.services.stock_reconciliation import (
    current_stock_report,
    daily_stock_report,
    monthly_stock_report,
)
from permissions.roles import CAP_INVENTORY_RECORD, CAP_LEDGER_REPORT, HasCapability


# ==========================================================
# BASE
# ==========================================================


class _MovementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    List/retrieve stored rows; create only through a movement service.

    Subclasses set:
    - input_serializer_class
    - date_field (for ?date_from / ?date_to)
    - record(actor, data) -> created instance
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_RECORD
    input_serializer_class = None
    date_field = "date"
    site_scoped = True

    def filter_by_params(self, qs):
        if self.site_scoped:
            site_id = parse_uuid_param(self.request, "site_id")
            if site_id:
                qs = qs.filter(site_id=site_id)

        date_from = parse_date_param(self.request, "date_from", default_today=False)
        if date_from:
            qs = qs.filter(**{f"{self.date_field}__gte": date_from})

        date_to = parse_date_param(self.request, "date_to", default_today=False)
        if date_to:
            qs = qs.filter(**{f"{self.date_field}__lte": date_to})

        return qs

    def record(self, actor, data):
        raise NotImplementedError

    def create(self, request, *args, **kwargs):
        serializer = self.input_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)

        instance = self.record(request.user, serializer.validated_data)
        return Response(
            self.get_serializer(instance).data,
            status=status.HTTP_201_CREATED,
        )


# ==========================================================
# SITES
# ==========================================================


class SiteViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = SiteSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_RECORD
    queryset = Site.objects.order_by("name")

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = create_site(
            actor=self.request.user,
            name=data.get("name", ""),
            address=data.get("address", ""),
        )


# ==========================================================
# MOVEMENTS
# ==========================================================


class IncomingBatchViewSet(_MovementViewSet):
    serializer_class = IncomingBatchSerializer
    input_serializer_class = IncomingBatchInputSerializer
    date_field = "arrival_date"

    def get_queryset(self):
        return self.filter_by_params(
            IncomingBatch.objects.select_related("site").order_by("-arrival_date", "-created_at")
        )

    @extend_schema(request=IncomingBatchInputSerializer, responses={201: IncomingBatchSerializer})
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def record(self, actor, data):
        return record_incoming_batch(actor=actor, **data)


class MortalityViewSet(_MovementViewSet):
    serializer_class = MortalityRecordSerializer
    input_serializer_class = MortalityInputSerializer

    def get_queryset(self):
        qs = MortalityRecord.objects.select_related("site").order_by("-date", "-created_at")
        claim_status = optional_param(self.request, "claim_status")
        if claim_status:
            qs = qs.filter(claim_status=claim_status.upper())
        return self.filter_by_params(qs)

    @extend_schema(request=MortalityInputSerializer, responses={201: MortalityRecordSerializer})
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def record(self, actor, data):
        return record_mortality(actor=actor, **data)


class LiveShipmentViewSet(_MovementViewSet):
    serializer_class = LiveShipmentSerializer
    input_serializer_class = LiveShipmentInputSerializer

    def get_queryset(self):
        return self.filter_by_params(
            LiveShipment.objects.select_related("site").order_by("-date", "-created_at")
        )

    @extend_schema(request=LiveShipmentInputSerializer, responses={201: LiveShipmentSerializer})
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def record(self, actor, data):
        return record_live_shipment(actor=actor, **data)


class ProcessedShipmentViewSet(_MovementViewSet):
    serializer_class = ProcessedShipmentSerializer
    input_serializer_class = ProcessedShipmentInputSerializer
    site_scoped = False

    def get_queryset(self):
        return self.filter_by_params(
            ProcessedShipment.objects.prefetch_related("items").order_by("-date", "-created_at")
        )

    @extend_schema(
        request=ProcessedShipmentInputSerializer,
        responses={201: ProcessedShipmentSerializer},
    )
    def create(self, request, *args, **kwargs):
        return super().create(request, *args, **kwargs)

    def record(self, actor, data):
        return record_processed_shipment(actor=actor, **data)


# ==========================================================
# STOCK REPORTS
# ==========================================================


class DailyStockReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("date", str, required=False, description="YYYY-MM-DD (default today)"),
            OpenApiParameter("site_id", str, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        report = daily_stock_report(
            actor=request.user,
            report_date=parse_date_param(request, "date"),
            site_id=parse_uuid_param(request, "site_id"),
        )
        return Response(report)


class MonthlyStockReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("year", int, required=False),
            OpenApiParameter("month", int, required=False),
            OpenApiParameter("site_id", str, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        today = timezone.localdate()
        report = monthly_stock_report(
            actor=request.user,
            year=parse_int_param(request, "year", default=today.year),
            month=parse_int_param(request, "month", default=today.month),
            site_id=parse_uuid_param(request, "site_id"),
            today=today,
        )
        return Response(report)


class CurrentStockView(APIView):
    """Cumulative stock per site across every recorded movement."""

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[OpenApiParameter("site_id", str, required=False)],
        responses={200: dict},
    )
    def get(self, request):
        report = current_stock_report(
            actor=request.user,
            site_id=parse_uuid_param(request, "site_id"),
        )
        return Response(report)
