# sales/api/urls.py

"""
SALES API URLS (CANONICAL)

Rules:
- Explicit non-PK routes (like "receivables/") MUST be registered BEFORE
  router URLs.
- Customers are registered before the root sales prefix so "customers/"
  is never read as a sale id.

Provides:
    /api/sales/                         list (filters: status, category,
                                        customer, date_from, date_to, q)
    /api/sales/<uuid>/                  retrieve (items, payments, log)
    /api/sales/drafts/                  GET list, POST create
    /api/sales/drafts/count/
    /api/sales/<uuid>/finalize/         POST
    /api/sales/<uuid>/payments/         POST
    /api/sales/<uuid>/refresh/          POST
    /api/sales/customers/               CRUD
    /api/sales/receivables/             GET summary
    /api/sales/receivables/collect/     POST
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from sales.api.receivables import CollectPaymentView, ReceivablesSummaryView
from sales.api.viewsets.customer import CustomerViewSet
from sales.api.viewsets.sale import SaleViewSet

router = SimpleRouter()
router.register(r"customers", CustomerViewSet, basename="customers")
router.register(r"", SaleViewSet, basename="sales")

urlpatterns = [
    path("receivables/", ReceivablesSummaryView.as_view(), name="sales-receivables"),
    path(
        "receivables/collect/",
        CollectPaymentView.as_view(),
        name="sales-receivables-collect",
    ),
    path("", include(router.urls)),
]
