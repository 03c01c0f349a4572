from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from finance.services.exceptions import (
    ForbiddenError,
    LedgerValidationError,
    NotFoundError,
)
from inventory.models import IncomingBatch, LiveShipment, MortalityRecord, Site
from inventory.services.movements import (
    create_site,
    record_incoming_batch,
    record_live_shipment,
    record_mortality,
    record_processed_shipment,
)

User = get_user_model()


class MovementRecordingTests(TestCase):
    """
    Tests for the movement store write path.

    GUARANTEES:
    - Quantities and prices are validated before anything is written
    - Live shipments never take a site below zero
    - Only admin / owner may record movements
    """

    def setUp(self):
        self.owner = User.objects.create_user(
            email="owner@example.com",
            password="pass",
            role="owner",
        )
        self.staff = User.objects.create_user(
            email="staff@example.com",
            password="pass",
            role="staff",
        )
        self.site = Site.objects.create(name="North Farm")

    # =====================================================
    # SITES
    # =====================================================

    def test_create_site(self):
        site = create_site(actor=self.owner, name="  South Farm ", address="Km 4")
        self.assertEqual(site.name, "South Farm")
        self.assertEqual(site.address, "Km 4")

    def test_duplicate_site_name_rejected(self):
        with self.assertRaises(LedgerValidationError):
            create_site(actor=self.owner, name="north farm")

    # =====================================================
    # INCOMING
    # =====================================================

    def test_incoming_batch_defaults_total_price(self):
        batch = record_incoming_batch(
            actor=self.owner,
            site_id=self.site.id,
            arrival_date=date(2024, 1, 1),
            bird_count=100,
            total_weight_kg="150.50",
            price_per_kg="2000",
            amount_transferred="100000",
        )

        self.assertEqual(batch.total_price, Decimal("301000.00"))
        self.assertEqual(batch.supplier_balance, Decimal("201000.00"))

    def test_incoming_batch_explicit_total_price_is_kept(self):
        batch = record_incoming_batch(
            actor=self.owner,
            site_id=self.site.id,
            arrival_date=date(2024, 1, 1),
            bird_count=100,
            total_weight_kg="150",
            price_per_kg="2000",
            total_price="295000",
        )
        self.assertEqual(batch.total_price, Decimal("295000.00"))

    def test_incoming_batch_rejects_zero_birds(self):
        with self.assertRaises(LedgerValidationError):
            record_incoming_batch(
                actor=self.owner,
                site_id=self.site.id,
                arrival_date=date(2024, 1, 1),
                bird_count=0,
                total_weight_kg="10",
                price_per_kg="10",
            )
        self.assertFalse(IncomingBatch.objects.exists())

    def test_unknown_site_is_not_found(self):
        with self.assertRaises(NotFoundError):
            record_incoming_batch(
                actor=self.owner,
                site_id="00000000-0000-0000-0000-000000000000",
                arrival_date=date(2024, 1, 1),
                bird_count=10,
                total_weight_kg="10",
                price_per_kg="10",
            )

    def test_staff_cannot_record(self):
        with self.assertRaises(ForbiddenError):
            record_incoming_batch(
                actor=self.staff,
                site_id=self.site.id,
                arrival_date=date(2024, 1, 1),
                bird_count=10,
                total_weight_kg="10",
                price_per_kg="10",
            )

    # =====================================================
    # MORTALITY
    # =====================================================

    def test_mortality_defaults_to_not_claimable(self):
        record = record_mortality(
            actor=self.owner,
            site_id=self.site.id,
            date=date(2024, 1, 2),
            bird_count=3,
        )
        self.assertEqual(record.claim_status, MortalityRecord.NOT_CLAIMABLE)

    def test_mortality_rejects_unknown_claim_status(self):
        with self.assertRaises(LedgerValidationError):
            record_mortality(
                actor=self.owner,
                site_id=self.site.id,
                date=date(2024, 1, 2),
                bird_count=3,
                claim_status="MAYBE",
            )

    # =====================================================
    # LIVE SHIPMENT
    # =====================================================

    def _stock(self, birds=100, on=date(2024, 1, 1)):
        return record_incoming_batch(
            actor=self.owner,
            site_id=self.site.id,
            arrival_date=on,
            bird_count=birds,
            total_weight_kg="200",
            price_per_kg="1000",
        )

    def test_live_shipment_amounts(self):
        self._stock()

        shipment = record_live_shipment(
            actor=self.owner,
            site_id=self.site.id,
            date=date(2024, 1, 2),
            customer_name="Mama Ngozi",
            bird_count=10,
            total_weight_kg="25",
            price_per_kg="3000",
            deduction="5000",
            is_dressed=True,
            dressing_fee_per_bird="500",
        )

        self.assertEqual(shipment.sale_amount, Decimal("80000.00"))
        self.assertEqual(shipment.net_amount, Decimal("75000.00"))

    def test_live_shipment_within_stock(self):
        self._stock(birds=100)

        record_live_shipment(
            actor=self.owner,
            site_id=self.site.id,
            date=date(2024, 1, 2),
            customer_name="Buyer",
            bird_count=100,
            total_weight_kg="200",
            price_per_kg="3000",
        )
        self.assertEqual(LiveShipment.objects.count(), 1)

    def test_live_shipment_over_stock_is_rejected(self):
        self._stock(birds=50)
        record_mortality(
            actor=self.owner,
            site_id=self.site.id,
            date=date(2024, 1, 1),
            bird_count=5,
        )

        with self.assertRaises(LedgerValidationError):
            record_live_shipment(
                actor=self.owner,
                site_id=self.site.id,
                date=date(2024, 1, 2),
                customer_name="Buyer",
                bird_count=46,
                total_weight_kg="90",
                price_per_kg="3000",
            )
        self.assertFalse(LiveShipment.objects.exists())

    def test_live_shipment_before_arrival_is_rejected(self):
        self._stock(birds=50, on=date(2024, 1, 10))

        with self.assertRaises(LedgerValidationError):
            record_live_shipment(
                actor=self.owner,
                site_id=self.site.id,
                date=date(2024, 1, 5),
                customer_name="Buyer",
                bird_count=1,
                total_weight_kg="2",
                price_per_kg="3000",
            )

    def test_backdated_shipment_cannot_overdraw_later_stock(self):
        self._stock(birds=50, on=date(2024, 1, 1))
        record_live_shipment(
            actor=self.owner,
            site_id=self.site.id,
            date=date(2024, 1, 10),
            customer_name="Buyer",
            bird_count=40,
            total_weight_kg="80",
            price_per_kg="3000",
        )

        # 50 had arrived by Jan 5, but only 10 remain overall.
        with self.assertRaises(LedgerValidationError):
            record_live_shipment(
                actor=self.owner,
                site_id=self.site.id,
                date=date(2024, 1, 5),
                customer_name="Other",
                bird_count=20,
                total_weight_kg="40",
                price_per_kg="3000",
            )

    # =====================================================
    # PROCESSED SHIPMENT
    # =====================================================

    def test_processed_shipment_totals_from_items(self):
        shipment = record_processed_shipment(
            actor=self.owner,
            date=date(2024, 1, 3),
            customer_name="Hotel Bravo",
            items=[
                {"meat_type": "Breast", "weight_kg": "10", "price_per_kg": "5000"},
                {"meat_type": "Wings", "weight_kg": "4.5", "price_per_kg": "3000"},
            ],
            deduction="1500",
        )

        self.assertEqual(shipment.items.count(), 2)
        self.assertEqual(shipment.sale_amount, Decimal("63500.00"))
        self.assertEqual(shipment.net_amount, Decimal("62000.00"))

    def test_processed_shipment_requires_items(self):
        with self.assertRaises(LedgerValidationError):
            record_processed_shipment(
                actor=self.owner,
                date=date(2024, 1, 3),
                customer_name="Hotel Bravo",
                items=[],
            )
