# sales/api/receivables.py

"""
RECEIVABLES API

PATH: sales/api/receivables.py

Endpoints:
- GET  /api/sales/receivables/?date=YYYY-MM-DD
    Outstanding per customer (largest first) + active total.
    With ?date also returns the day's new receivables and collections.
- POST /api/sales/receivables/collect/
    One customer payment settled oldest-sale-first.

Security:
- Admin / owner only
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.query_params import parse_date_param
from permissions.roles import CAP_LEDGER_OPERATE, CAP_LEDGER_REPORT, HasCapability
from sales.serializers import CollectPaymentInputSerializer
from sales.services.receivables import collect_customer_payment
from sales.services.receivables_report import receivables_summary


class ReceivablesSummaryView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("date", str, required=False, description="YYYY-MM-DD"),
        ],
        responses={200: dict},
    )
    def get(self, request):
        on_date = parse_date_param(request, "date", default_today=False)
        return Response(receivables_summary(actor=request.user, on_date=on_date))


class CollectPaymentView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_OPERATE

    @extend_schema(request=CollectPaymentInputSerializer, responses={200: dict})
    def post(self, request):
        serializer = CollectPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = collect_customer_payment(
            customer_id=data["customer_id"],
            amount=data["amount"],
            method=data["method"],
            actor=request.user,
            payment_date=data.get("payment_date"),
            note=data.get("note", ""),
        )
        return Response(result)
