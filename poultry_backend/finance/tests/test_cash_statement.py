from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from finance.services.cash_statement import (
    annual_cash_statement,
    daily_cash_statement,
    monthly_cash_statement,
)
from finance.services.exceptions import ForbiddenError, LedgerValidationError
from inventory.models import MortalityRecord, Site
from inventory.services.movements import (
    record_incoming_batch,
    record_live_shipment,
    record_mortality,
    record_processed_shipment,
)
from sales.models import Customer, Sale
from sales.services.draft_service import create_draft_sale
from sales.services.receivables import apply_payment, finalize_sale

User = get_user_model()

DAY = date(2024, 1, 10)


class CashStatementTests(TestCase):
    """
    Jan 10 fixture:
    - processed meat invoice 1,000,000, 400,000 paid at finalize
    - live bird invoice 300,000, paid in full
    - 100,000 collected on a Jan 5 invoice of 200,000
    - batch 100 birds x 200 kg x 1,000 = 200,000
    - shipment deductions 5,000 (live) + 1,500 (processed)
    - 5 NOT_CLAIMABLE deaths at 2 kg x 1,000 = 10,000

    GUARANTEES:
    - cash in only counts payment events, each exactly once
    - a month's net equals the sum of its daily nets
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        self.site = Site.objects.create(name="North Farm")
        self.customer = Customer.objects.create(name="Mama Ngozi Foods")

        processed = self._sale(Sale.CATEGORY_PROCESSED_MEAT, "1000000", DAY)
        self._finalize(processed, "400000")

        live = self._sale(Sale.CATEGORY_LIVE_BIRD, "300000", DAY)
        self._finalize(live, "300000")

        older = self._sale(Sale.CATEGORY_PROCESSED_MEAT, "200000", date(2024, 1, 5))
        self._finalize(older, "0", method="")
        apply_payment(
            sale_id=older.id,
            additional_amount="100000",
            method="transfer",
            reason="part payment",
            actor=self.admin,
            payment_date=DAY,
        )

        record_incoming_batch(
            actor=self.admin,
            site_id=self.site.id,
            arrival_date=DAY,
            bird_count=100,
            total_weight_kg="200",
            price_per_kg="1000",
        )
        record_live_shipment(
            actor=self.admin,
            site_id=self.site.id,
            date=DAY,
            customer_name="Roadside buyer",
            bird_count=10,
            total_weight_kg="20",
            price_per_kg="3000",
            deduction="5000",
        )
        record_processed_shipment(
            actor=self.admin,
            date=DAY,
            customer_name="Hotel Bravo",
            items=[{"meat_type": "Breast", "weight_kg": "10", "price_per_kg": "5000"}],
            deduction="1500",
        )
        record_mortality(
            actor=self.admin,
            site_id=self.site.id,
            date=DAY,
            bird_count=5,
            claim_status=MortalityRecord.NOT_CLAIMABLE,
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _sale(self, category, total, on):
        return create_draft_sale(
            actor=self.admin,
            customer_id=self.customer.id,
            transaction_date=on,
            category=category,
            items=[{"description": "Line", "subtotal": total}],
        )

    def _finalize(self, sale, paid, method="cash"):
        return finalize_sale(
            sale_id=sale.id,
            payment_amount=paid,
            payment_method=method,
            actor=self.admin,
        )

    # =====================================================
    # DAILY
    # =====================================================

    def test_daily_cash_in(self):
        statement = daily_cash_statement(actor=self.admin, on_date=DAY)

        self.assertEqual(statement["cash_in"]["processed_meat"], Decimal("400000.00"))
        self.assertEqual(statement["cash_in"]["live_bird"], Decimal("300000.00"))
        self.assertEqual(statement["cash_in"]["collections"], Decimal("100000.00"))
        self.assertEqual(statement["cash_in"]["total"], Decimal("800000.00"))

    def test_daily_cash_out(self):
        statement = daily_cash_statement(actor=self.admin, on_date=DAY)

        self.assertEqual(statement["cash_out"]["bird_purchases"], Decimal("200000.00"))
        self.assertEqual(statement["cash_out"]["live_shipment_costs"], Decimal("5000.00"))
        self.assertEqual(statement["cash_out"]["processed_shipment_costs"], Decimal("1500.00"))
        self.assertEqual(statement["cash_out"]["mortality_loss"], Decimal("10000.00"))
        self.assertEqual(statement["cash_out"]["total"], Decimal("216500.00"))
        self.assertEqual(statement["net"], Decimal("583500.00"))

    def test_daily_sales_and_receivables(self):
        statement = daily_cash_statement(actor=self.admin, on_date=DAY)

        self.assertEqual(statement["sales_today"]["processed_meat"], Decimal("1000000.00"))
        self.assertEqual(statement["sales_today"]["total"], Decimal("1300000.00"))
        self.assertEqual(statement["receivables"]["new"], Decimal("600000.00"))
        self.assertEqual(statement["receivables"]["collected"], Decimal("100000.00"))
        self.assertEqual(statement["receivables"]["active_total"], Decimal("700000.00"))

    def test_unpaid_invoice_day_has_no_cash_in(self):
        statement = daily_cash_statement(actor=self.admin, on_date=date(2024, 1, 5))
        self.assertEqual(statement["cash_in"]["total"], Decimal("0.00"))
        self.assertEqual(statement["receivables"]["new"], Decimal("100000.00"))

    def test_empty_day_is_zero(self):
        statement = daily_cash_statement(actor=self.admin, on_date=date(2024, 2, 1))
        self.assertEqual(statement["cash_in"]["total"], Decimal("0.00"))
        self.assertEqual(statement["cash_out"]["total"], Decimal("0.00"))
        self.assertEqual(statement["net"], Decimal("0.00"))

    # =====================================================
    # MONTHLY
    # =====================================================

    def test_monthly_net_is_sum_of_daily_nets(self):
        statement = monthly_cash_statement(
            actor=self.admin, year=2024, month=1, today=date(2024, 3, 1)
        )

        self.assertEqual(len(statement["days"]), 31)
        self.assertEqual(statement["net"], sum(d["net"] for d in statement["days"]))
        self.assertEqual(statement["net"], Decimal("583500.00"))
        self.assertEqual(statement["sales"]["total"], Decimal("1500000.00"))

    def test_current_month_stops_at_today(self):
        statement = monthly_cash_statement(
            actor=self.admin, year=2024, month=1, today=date(2024, 1, 10)
        )
        self.assertEqual(len(statement["days"]), 10)
        self.assertEqual(statement["days"][-1]["date"], DAY)

    def test_future_month_is_empty(self):
        statement = monthly_cash_statement(
            actor=self.admin, year=2024, month=6, today=date(2024, 1, 31)
        )
        self.assertEqual(statement["days"], [])
        self.assertEqual(statement["net"], Decimal("0.00"))
        self.assertEqual(statement["period"]["start_date"], date(2024, 6, 1))

    def test_future_month_runs_no_queries(self):
        with self.assertNumQueries(0):
            statement = monthly_cash_statement(
                actor=self.admin, year=2024, month=6, today=date(2024, 1, 31)
            )
        self.assertEqual(statement["sales"]["total"], Decimal("0.00"))

    # =====================================================
    # YEARLY
    # =====================================================

    def test_yearly_months_sum_to_year_net(self):
        statement = annual_cash_statement(actor=self.admin, year=2024, today=date(2024, 3, 15))

        months = statement["months"]
        self.assertEqual([m["month"] for m in months], [1, 2, 3])
        self.assertEqual(months[-1]["end_date"], date(2024, 3, 15))
        self.assertEqual(statement["net"], sum(m["net"] for m in months))
        self.assertEqual(statement["net"], Decimal("583500.00"))
        self.assertEqual(months[0]["cash_in"], Decimal("800000.00"))
        self.assertEqual(months[1]["net"], Decimal("0.00"))

    def test_yearly_buckets_match_january(self):
        yearly = annual_cash_statement(actor=self.admin, year=2024, today=date(2024, 12, 31))
        january = monthly_cash_statement(
            actor=self.admin, year=2024, month=1, today=date(2024, 12, 31)
        )

        self.assertEqual(len(yearly["months"]), 12)
        self.assertEqual(yearly["cash_in"], january["cash_in"])
        self.assertEqual(yearly["cash_out"], january["cash_out"])
        self.assertEqual(yearly["cash_out"]["mortality_loss"], Decimal("10000.00"))
        self.assertEqual(yearly["sales"]["total"], Decimal("1500000.00"))

    def test_future_year_is_empty(self):
        with self.assertNumQueries(0):
            statement = annual_cash_statement(
                actor=self.admin, year=2025, today=date(2024, 6, 1)
            )
        self.assertEqual(statement["months"], [])
        self.assertEqual(statement["net"], Decimal("0.00"))

    def test_year_out_of_range(self):
        with self.assertRaises(LedgerValidationError):
            annual_cash_statement(actor=self.admin, year=0)

    def test_staff_is_forbidden(self):
        staff = User.objects.create_user(
            email="staff@example.com", password="pass", role="staff"
        )
        with self.assertRaises(ForbiddenError):
            daily_cash_statement(actor=staff, on_date=DAY)


class FinanceApiTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(
            email="owner@example.com", password="pass", role="owner"
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_daily_endpoint(self):
        res = self.client.get("/api/finance/cash/daily/", {"date": "2024-01-10"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["date"], DAY)
        self.assertEqual(res.data["net"], Decimal("0.00"))

    def test_bad_date_is_400(self):
        res = self.client.get("/api/finance/cash/daily/", {"date": "10/01/2024"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bad_month_is_400(self):
        res = self.client.get("/api/finance/cash/monthly/", {"year": "2024", "month": "13"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mortality_loss_endpoint(self):
        res = self.client.get(
            "/api/finance/mortality-loss/",
            {"date_from": "2024-01-01", "date_to": "2024-01-31"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["records"], [])
        self.assertEqual(res.data["total"], Decimal("0.00"))

    def test_staff_is_forbidden(self):
        staff = User.objects.create_user(
            email="staff@example.com", password="pass", role="staff"
        )
        self.client.force_authenticate(user=staff)
        res = self.client.get("/api/finance/cash/daily/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)


class SingleSaleCashDayTests(TestCase):
    """One invoice paid 400,000 at finalize and one 300,000 batch, nothing else."""

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        site = Site.objects.create(name="South Farm")
        customer = Customer.objects.create(name="Kaduna Cold Room")

        sale = create_draft_sale(
            actor=self.admin,
            customer_id=customer.id,
            transaction_date=DAY,
            category=Sale.CATEGORY_PROCESSED_MEAT,
            items=[{"description": "Whole chicken", "subtotal": "1000000"}],
        )
        finalize_sale(
            sale_id=sale.id,
            payment_amount="400000",
            payment_method="cash",
            actor=self.admin,
        )
        record_incoming_batch(
            actor=self.admin,
            site_id=site.id,
            arrival_date=DAY,
            bird_count=150,
            total_weight_kg="300",
            price_per_kg="1000",
        )

    def test_cash_in_out_and_net(self):
        statement = daily_cash_statement(actor=self.admin, on_date=DAY)

        self.assertEqual(statement["cash_in"]["total"], Decimal("400000.00"))
        self.assertEqual(statement["cash_out"]["total"], Decimal("300000.00"))
        self.assertEqual(statement["net"], Decimal("100000.00"))
        self.assertEqual(statement["cash_in"]["collections"], Decimal("0.00"))


class AnnualCashApiTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            email="owner@example.com", password="pass", role="owner"
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_yearly_endpoint(self):
        res = self.client.get("/api/finance/cash/yearly/", {"year": "2020"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["period"]["year"], 2020)
        self.assertEqual(len(res.data["months"]), 12)
        self.assertEqual(res.data["net"], Decimal("0.00"))

    def test_bad_year_is_400(self):
        for bad in ("twenty", "0"):
            with self.subTest(year=bad):
                res = self.client.get("/api/finance/cash/yearly/", {"year": bad})
                self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_is_forbidden(self):
        staff = User.objects.create_user(
            email="staff@example.com", password="pass", role="staff"
        )
        self.client.force_authenticate(user=staff)
        res = self.client.get("/api/finance/cash/yearly/")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
