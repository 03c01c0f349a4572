# finance/api/views.py

"""
======================================================
PATH: finance/api/views.py
======================================================
CASH STATEMENT API (READ-ONLY)

- GET /api/finance/cash/daily/?date=YYYY-MM-DD   (default today)
- GET /api/finance/cash/monthly/?year=&month=    (default current month)
- GET /api/finance/cash/yearly/?year=            (default current year)
- GET /api/finance/mortality-loss/?date_from=&date_to=

Security:
- Admin / owner only
======================================================
"""

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.query_params import parse_date_param, parse_int_param
from finance.services.cash_statement import (
    annual_cash_statement,
    daily_cash_statement,
    monthly_cash_statement,
)
from finance.services.loss_valuation import mortality_loss_report
from permissions.roles import CAP_LEDGER_REPORT, HasCapability


class DailyCashStatementView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("date", str, required=False, description="YYYY-MM-DD (default today)"),
        ],
        responses={200: dict},
    )
    def get(self, request):
        statement = daily_cash_statement(
            actor=request.user,
            on_date=parse_date_param(request, "date"),
        )
        return Response(statement)


class MonthlyCashStatementView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("year", int, required=False),
            OpenApiParameter("month", int, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        today = timezone.localdate()
        statement = monthly_cash_statement(
            actor=request.user,
            year=parse_int_param(request, "year", default=today.year),
            month=parse_int_param(request, "month", default=today.month),
            today=today,
        )
        return Response(statement)


class AnnualCashStatementView(APIView):
    """Year totals with a per-month breakdown up to today."""

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[OpenApiParameter("year", int, required=False)],
        responses={200: dict},
    )
    def get(self, request):
        today = timezone.localdate()
        statement = annual_cash_statement(
            actor=request.user,
            year=parse_int_param(request, "year", default=today.year),
            today=today,
        )
        return Response(statement)


class MortalityLossView(APIView):
    """Valued NOT_CLAIMABLE mortality per record over a date window."""

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_LEDGER_REPORT

    @extend_schema(
        parameters=[
            OpenApiParameter("date_from", str, required=False, description="YYYY-MM-DD (default today)"),
            OpenApiParameter("date_to", str, required=False, description="YYYY-MM-DD (default date_from)"),
        ],
        responses={200: dict},
    )
    def get(self, request):
        start = parse_date_param(request, "date_from")
        end = parse_date_param(request, "date_to", default_today=False) or start
        return Response(mortality_loss_report(actor=request.user, start=start, end=end))
