# inventory/api/urls.py

"""
INVENTORY API URLS

Provides:
    /api/inventory/sites/
    /api/inventory/incoming/
    /api/inventory/mortality/
    /api/inventory/shipments/live/
    /api/inventory/shipments/processed/
    /api/inventory/stock/daily/
    /api/inventory/stock/monthly/
    /api/inventory/stock/current/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from inventory.api.views import (
    CurrentStockView,
    DailyStockReportView,
    IncomingBatchViewSet,
    LiveShipmentViewSet,
    MonthlyStockReportView,
    MortalityViewSet,
    ProcessedShipmentViewSet,
    SiteViewSet,
)

router = SimpleRouter()
router.register(r"sites", SiteViewSet, basename="inventory-sites")
router.register(r"incoming", IncomingBatchViewSet, basename="inventory-incoming")
router.register(r"mortality", MortalityViewSet, basename="inventory-mortality")
router.register(r"shipments/live", LiveShipmentViewSet, basename="inventory-live-shipments")
router.register(
    r"shipments/processed",
    ProcessedShipmentViewSet,
    basename="inventory-processed-shipments",
)

urlpatterns = [
    path("stock/daily/", DailyStockReportView.as_view(), name="inventory-stock-daily"),
    path("stock/monthly/", MonthlyStockReportView.as_view(), name="inventory-stock-monthly"),
    path("stock/current/", CurrentStockView.as_view(), name="inventory-stock-current"),
    path("", include(router.urls)),
]
