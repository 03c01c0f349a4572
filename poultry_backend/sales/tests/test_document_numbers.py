import threading
from datetime import date

from django.contrib.auth import get_user_model
from django.db import connection, transaction
from django.test import (
    SimpleTestCase,
    TestCase,
    TransactionTestCase,
    override_settings,
)

from sales.models import Customer, DocumentSequence, Sale
from sales.services.document_numbers import (
    allocate_document_number,
    format_document_number,
    parse_sequence,
    period_prefix,
)
from sales.services.draft_service import create_draft_sale
from sales.services.receivables import finalize_sale

User = get_user_model()


class DocumentNumberFormatTests(TestCase):
    def test_period_prefix(self):
        self.assertEqual(period_prefix(date(2024, 1, 15)), "INV-202401-")

    @override_settings(DOCUMENT_NUMBER_PREFIX="SO", DOCUMENT_NUMBER_PADDING=4)
    def test_prefix_and_padding_from_settings(self):
        prefix = period_prefix(date(2024, 12, 1))
        self.assertEqual(format_document_number(prefix, 7), "SO-202412-0007")

    def test_parse_sequence(self):
        self.assertEqual(parse_sequence("INV-202401-042", "INV-202401-"), 42)
        self.assertEqual(parse_sequence("INV-202401-1000", "INV-202401-"), 1000)
        self.assertIsNone(parse_sequence("INV-202402-001", "INV-202401-"))
        self.assertIsNone(parse_sequence("INV-202401-A1", "INV-202401-"))
        self.assertIsNone(parse_sequence(None, "INV-202401-"))


class DocumentNumberAllocationTests(TestCase):
    """
    GUARANTEES:
    - Sequential, gapless numbers per period
    - Each period starts at 001
    - Never reuses an existing number
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass",
            role="admin",
        )
        self.customer = Customer.objects.create(name="Acme Foods")

    def _finalized(self, on: date) -> Sale:
        sale = create_draft_sale(
            actor=self.admin,
            customer_id=self.customer.id,
            transaction_date=on,
            category=Sale.CATEGORY_LIVE_BIRD,
            items=[{"description": "Live birds", "subtotal": "1000"}],
        )
        return finalize_sale(
            sale_id=sale.id,
            payment_amount="0",
            payment_method="",
            actor=self.admin,
        )

    def test_sequential_numbers_within_period(self):
        numbers = [self._finalized(date(2024, 1, d)).document_number for d in (3, 9, 20)]
        self.assertEqual(numbers, ["INV-202401-001", "INV-202401-002", "INV-202401-003"])

    def test_each_period_starts_at_one(self):
        self._finalized(date(2024, 1, 31))
        self._finalized(date(2024, 1, 31))
        feb = self._finalized(date(2024, 2, 1))
        self.assertEqual(feb.document_number, "INV-202402-001")

    def test_numbering_follows_transaction_month(self):
        late_entry = self._finalized(date(2023, 12, 28))
        self.assertEqual(late_entry.document_number, "INV-202312-001")

    def test_continues_after_existing_numbers(self):
        draft = create_draft_sale(
            actor=self.admin,
            customer_id=self.customer.id,
            transaction_date=date(2024, 3, 1),
            category=Sale.CATEGORY_LIVE_BIRD,
            items=[{"description": "Imported", "subtotal": "10"}],
        )
        draft.write_projection(
            amount_paid=draft.amount_paid,
            outstanding=draft.outstanding,
            status=Sale.STATUS_DEBT,
            document_number="INV-202403-041",
            is_finalized=True,
        )

        self.assertEqual(self._finalized(date(2024, 3, 5)).document_number, "INV-202403-042")

    def test_counter_beats_lexicographic_order(self):
        DocumentSequence.objects.create(prefix="INV-202404-", last_value=999)
        self.assertEqual(self._finalized(date(2024, 4, 1)).document_number, "INV-202404-1000")
        self.assertEqual(self._finalized(date(2024, 4, 2)).document_number, "INV-202404-1001")

    def test_rolled_back_allocation_leaves_no_gap(self):
        try:
            with transaction.atomic():
                allocate_document_number(date(2024, 5, 1))
                raise ValueError("abort")
        except ValueError:
            pass

        self.assertEqual(self._finalized(date(2024, 5, 2)).document_number, "INV-202405-001")


class AllocationOutsideTransactionTests(SimpleTestCase):
    def test_requires_surrounding_transaction(self):
        with self.assertRaises(RuntimeError):
            allocate_document_number(date(2024, 6, 1))


class ConcurrentAllocationTests(TransactionTestCase):
    """Parallel finalizes in one period never share a number.

    PostgreSQL serialises on the counter row lock, SQLite on BEGIN IMMEDIATE.
    """

    WORKERS = 8

    def setUp(self):
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass",
            role="admin",
        )
        customer = Customer.objects.create(name="Parallel Ltd")
        self.sale_ids = [
            create_draft_sale(
                actor=self.admin,
                customer_id=customer.id,
                transaction_date=date(2024, 7, 1),
                category=Sale.CATEGORY_PROCESSED_MEAT,
                items=[{"description": "Breast", "subtotal": "500"}],
            ).id
            for _ in range(self.WORKERS)
        ]

    def test_parallel_finalize_numbers_are_unique_and_gapless(self):
        errors = []
        barrier = threading.Barrier(self.WORKERS)

        def worker(sale_id):
            try:
                barrier.wait()
                finalize_sale(
                    sale_id=sale_id,
                    payment_amount="0",
                    payment_method="",
                    actor=self.admin,
                )
            except Exception as exc:  # surfaced through the assertion below
                errors.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker, args=(sid,)) for sid in self.sale_ids]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])

        numbers = sorted(
            Sale.objects.filter(id__in=self.sale_ids).values_list("document_number", flat=True)
        )
        expected = [f"INV-202407-{i:03d}" for i in range(1, self.WORKERS + 1)]
        self.assertEqual(numbers, expected)
