# finance/api/urls.py

from django.urls import path

from finance.api.views import (
    AnnualCashStatementView,
    DailyCashStatementView,
    MonthlyCashStatementView,
    MortalityLossView,
)

urlpatterns = [
    path("cash/daily/", DailyCashStatementView.as_view(), name="finance-cash-daily"),
    path("cash/monthly/", MonthlyCashStatementView.as_view(), name="finance-cash-monthly"),
    path("cash/yearly/", AnnualCashStatementView.as_view(), name="finance-cash-yearly"),
    path("mortality-loss/", MortalityLossView.as_view(), name="finance-mortality-loss"),
]
