# sales/tests/test_api.py

"""
SALES API TESTS

Run with:
    pytest poultry_backend/sales/tests/test_api.py

Covers the HTTP surface only: routing, role gating and how service errors
are mapped (400 / 404 / 409). Ledger arithmetic is covered in
test_receivables.py.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from sales.models import BalanceAdjustmentLog, Customer, PaymentRecord, Sale

User = get_user_model()

BASE = "/api/sales/"


class SalesApiTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        self.staff = User.objects.create_user(
            email="staff@example.com", password="pass", role="staff"
        )
        self.customer = Customer.objects.create(name="Mama Ngozi Foods")

        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    # -----------------------------
    # Helpers
    # -----------------------------

    def _create_draft(self, total="1000000.00", on="2024-01-10"):
        res = self.client.post(
            f"{BASE}drafts/",
            {
                "customer_id": str(self.customer.id),
                "transaction_date": on,
                "category": Sale.CATEGORY_PROCESSED_MEAT,
                "items": [
                    {
                        "description": "Whole chicken",
                        "weight_kg": "500.00",
                        "unit_price": "2000.00",
                        "subtotal": total,
                    }
                ],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        return res.data

    def _finalize(self, sale_id, amount="400000.00", method="cash"):
        return self.client.post(
            f"{BASE}{sale_id}/finalize/",
            {"payment_amount": amount, "payment_method": method},
            format="json",
        )

    # =====================================================
    # DRAFTS
    # =====================================================

    def test_create_draft(self):
        data = self._create_draft()

        self.assertEqual(data["status"], Sale.STATUS_DRAFT)
        self.assertIsNone(data["document_number"])
        self.assertEqual(data["grand_total"], "1000000.00")
        self.assertEqual(len(data["items"]), 1)
        self.assertEqual(data["customer_name"], "Mama Ngozi Foods")

    def test_draft_requires_items(self):
        res = self.client.post(
            f"{BASE}drafts/",
            {
                "customer_id": str(self.customer.id),
                "transaction_date": "2024-01-10",
                "category": Sale.CATEGORY_LIVE_BIRD,
                "items": [],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_draft_list_and_count(self):
        self._create_draft()
        self._create_draft()

        res = self.client.get(f"{BASE}drafts/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(f"{BASE}drafts/count/")
        self.assertEqual(res.data, {"count": 2})

    # =====================================================
    # FINALIZE + PAYMENTS
    # =====================================================

    def test_finalize_then_pay_in_full(self):
        sale_id = self._create_draft()["id"]

        res = self._finalize(sale_id)
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["document_number"], "INV-202401-001")
        self.assertEqual(res.data["status"], Sale.STATUS_PARTIAL)
        self.assertEqual(res.data["outstanding"], "600000.00")
        self.assertEqual(len(res.data["payments"]), 1)

        res = self.client.post(
            f"{BASE}{sale_id}/payments/",
            {
                "additional_amount": "600000.00",
                "method": "transfer",
                "reason": "final pay",
                "payment_date": "2024-01-20",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["status"], Sale.STATUS_PAID)
        self.assertEqual(res.data["outstanding"], "0.00")
        self.assertEqual(len(res.data["adjustment_logs"]), 1)

    def test_overpayment_is_400(self):
        sale_id = self._create_draft()["id"]
        self._finalize(sale_id, amount="1000000.00")

        res = self.client.post(
            f"{BASE}{sale_id}/payments/",
            {"additional_amount": "1.00", "method": "cash", "reason": "extra"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", res.data)
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_finalize_twice_is_409(self):
        sale_id = self._create_draft()["id"]
        self._finalize(sale_id)

        res = self._finalize(sale_id, amount="0.00", method="")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_payment_on_draft_is_409(self):
        sale_id = self._create_draft()["id"]
        res = self.client.post(
            f"{BASE}{sale_id}/payments/",
            {"additional_amount": "10.00", "method": "cash", "reason": "early"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_unknown_sale_is_404(self):
        missing = "00000000-0000-0000-0000-000000000000"

        self.assertEqual(
            self.client.get(f"{BASE}{missing}/").status_code,
            status.HTTP_404_NOT_FOUND,
        )
        self.assertEqual(self._finalize(missing).status_code, status.HTTP_404_NOT_FOUND)

    def test_refresh_endpoint(self):
        sale_id = self._create_draft()["id"]
        self._finalize(sale_id)
        Sale.objects.filter(pk=sale_id).update(amount_paid=Decimal("0.00"))

        res = self.client.post(f"{BASE}{sale_id}/refresh/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["amount_paid"], "400000.00")

    # =====================================================
    # LIST / FILTERS
    # =====================================================

    def test_list_filters(self):
        paid_id = self._create_draft(on="2024-01-05")["id"]
        self._finalize(paid_id, amount="1000000.00")
        open_id = self._create_draft(on="2024-01-10")["id"]
        self._finalize(open_id)
        self._create_draft(on="2024-01-12")

        res = self.client.get(BASE)
        self.assertEqual(res.data["count"], 3)

        res = self.client.get(BASE, {"outstanding_only": "true"})
        self.assertEqual([r["id"] for r in res.data["results"]], [open_id])

        res = self.client.get(BASE, {"status": Sale.STATUS_PAID})
        self.assertEqual([r["id"] for r in res.data["results"]], [paid_id])

        res = self.client.get(BASE, {"date_from": "2024-01-06", "date_to": "2024-01-10"})
        self.assertEqual([r["id"] for r in res.data["results"]], [open_id])

    # =====================================================
    # RECEIVABLES
    # =====================================================

    def test_receivables_summary_and_collect(self):
        first = self._create_draft(total="100000.00", on="2024-01-01")["id"]
        self._finalize(first, amount="0.00", method="")
        second = self._create_draft(total="200000.00", on="2024-01-05")["id"]
        self._finalize(second, amount="0.00", method="")

        res = self.client.get(f"{BASE}receivables/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_outstanding"], Decimal("300000.00"))

        res = self.client.post(
            f"{BASE}receivables/collect/",
            {
                "customer_id": str(self.customer.id),
                "amount": "150000.00",
                "method": "transfer",
                "payment_date": str(date(2024, 1, 15)),
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(len(res.data["allocations"]), 2)
        self.assertEqual(res.data["remaining_outstanding"], Decimal("150000.00"))
        self.assertEqual(BalanceAdjustmentLog.objects.count(), 2)

        res = self.client.get(f"{BASE}receivables/", {"date": "2024-01-15"})
        self.assertEqual(res.data["collections"], Decimal("150000.00"))

    def test_receivables_bad_date_is_400(self):
        res = self.client.get(f"{BASE}receivables/", {"date": "2024-13-40"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    # =====================================================
    # CUSTOMERS
    # =====================================================

    def test_customer_crud(self):
        res = self.client.post(
            f"{BASE}customers/",
            {"name": "Hotel Bravo", "phone": "0803"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        customer_id = res.data["id"]

        res = self.client.patch(
            f"{BASE}customers/{customer_id}/",
            {"address": "Ring Road"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK, res.data)
        self.assertEqual(res.data["address"], "Ring Road")

        res = self.client.delete(f"{BASE}customers/{customer_id}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

    def test_customer_outstanding_total(self):
        sale_id = self._create_draft()["id"]
        self._finalize(sale_id)

        res = self.client.get(f"{BASE}customers/{self.customer.id}/")
        self.assertEqual(res.data["outstanding_total"], "600000.00")

    def test_customer_with_debt_cannot_be_deleted(self):
        sale_id = self._create_draft()["id"]
        self._finalize(sale_id, amount="0.00", method="")

        res = self.client.delete(f"{BASE}customers/{self.customer.id}/")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Customer.objects.filter(id=self.customer.id).exists())

    # =====================================================
    # ACCESS
    # =====================================================

    def test_staff_is_forbidden(self):
        self.client.force_authenticate(user=self.staff)

        self.assertEqual(self.client.get(BASE).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            self.client.get(f"{BASE}receivables/").status_code,
            status.HTTP_403_FORBIDDEN,
        )

    def test_anonymous_is_unauthorized(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.client.get(BASE).status_code, status.HTTP_401_UNAUTHORIZED)
