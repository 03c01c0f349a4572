from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from finance.services.exceptions import LedgerValidationError
from finance.services.loss_valuation import (
    find_reference_batch,
    mortality_loss_by_day,
    mortality_loss_report,
    mortality_loss_total,
    mortality_loss_value,
)
from inventory.models import IncomingBatch, MortalityRecord, Site

User = get_user_model()


class MortalityLossValuationTests(TestCase):
    """
    GUARANTEES:
    - NOT_CLAIMABLE deaths are valued at the nearest preceding batch price
    - CLAIMABLE deaths and deaths without a reference batch are worth 0
    - only batches of the same site are used as reference
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass", role="admin"
        )
        self.site = Site.objects.create(name="North Farm")
        self.other = Site.objects.create(name="South Farm")

        # 2 kg per bird at 20,000 / kg
        self.first = self._batch(self.site, date(2024, 1, 1), price="20000")

    def _batch(self, site, on, *, price, birds=1000, weight="2000"):
        return IncomingBatch.objects.create(
            site=site,
            arrival_date=on,
            bird_count=birds,
            total_weight_kg=weight,
            price_per_kg=price,
        )

    def _death(self, on, birds, *, site=None, claim=MortalityRecord.NOT_CLAIMABLE):
        return MortalityRecord.objects.create(
            site=site or self.site,
            date=on,
            bird_count=birds,
            claim_status=claim,
        )

    def test_worked_example(self):
        record = self._death(date(2024, 1, 5), 10)
        self.assertEqual(mortality_loss_value(record), Decimal("400000.00"))

    def test_claimable_is_zero(self):
        record = self._death(date(2024, 1, 5), 10, claim=MortalityRecord.CLAIMABLE)
        self.assertEqual(mortality_loss_value(record), Decimal("0.00"))

    def test_no_reference_batch_is_zero(self):
        record = self._death(date(2023, 12, 31), 10)
        self.assertEqual(mortality_loss_value(record), Decimal("0.00"))

        elsewhere = self._death(date(2024, 1, 5), 10, site=self.other)
        self.assertEqual(mortality_loss_value(elsewhere), Decimal("0.00"))

    def test_nearest_preceding_batch_is_used(self):
        later = self._batch(self.site, date(2024, 1, 10), price="30000")
        self._batch(self.other, date(2024, 1, 8), price="99999")

        before = self._death(date(2024, 1, 9), 1)
        same_day = self._death(date(2024, 1, 10), 1)

        self.assertEqual(find_reference_batch(self.site.id, date(2024, 1, 9)), self.first)
        self.assertEqual(find_reference_batch(self.site.id, date(2024, 1, 10)), later)
        self.assertEqual(mortality_loss_value(before), Decimal("40000.00"))
        self.assertEqual(mortality_loss_value(same_day), Decimal("60000.00"))

    def test_per_bird_weight_is_not_rounded_early(self):
        batch_site = Site.objects.create(name="West Farm")
        self._batch(batch_site, date(2024, 1, 1), price="1000", birds=3, weight="10")
        record = self._death(date(2024, 1, 2), 2, site=batch_site)

        # 2 * (10 / 3) * 1000 = 6666.666...
        self.assertEqual(mortality_loss_value(record), Decimal("6666.67"))

    def test_daily_totals(self):
        self._death(date(2024, 1, 5), 10)
        self._death(date(2024, 1, 5), 5)
        self._death(date(2024, 1, 6), 1, claim=MortalityRecord.CLAIMABLE)

        by_day = mortality_loss_by_day(date(2024, 1, 1), date(2024, 1, 31))
        self.assertEqual(by_day, {date(2024, 1, 5): Decimal("600000.00")})
        self.assertEqual(
            mortality_loss_total(date(2024, 1, 1), date(2024, 1, 31)),
            Decimal("600000.00"),
        )

    def test_report(self):
        self._death(date(2024, 1, 5), 10)
        self._death(date(2023, 12, 30), 3)

        report = mortality_loss_report(
            actor=self.admin, start=date(2023, 12, 1), end=date(2024, 1, 31)
        )

        self.assertEqual(report["total"], Decimal("400000.00"))
        self.assertEqual(len(report["records"]), 2)

        orphan, valued = report["records"]
        self.assertIsNone(orphan["reference_batch_id"])
        self.assertEqual(orphan["loss_value"], Decimal("0.00"))
        self.assertEqual(valued["reference_batch_id"], str(self.first.id))
        self.assertEqual(valued["site_name"], "North Farm")

    def test_report_rejects_inverted_window(self):
        with self.assertRaises(LedgerValidationError):
            mortality_loss_report(
                actor=self.admin, start=date(2024, 1, 31), end=date(2024, 1, 1)
            )
