# billing/tests/test_numbering.py
"""
Tests for sequential document numbers.

This module covers the ``TAG-DDMMYY-NNNN`` format, the daily
sequence and the retry on number collisions.
"""

from datetime import date
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase

from billing.exceptions import NumberAllocationError
from billing.models import Invoice
from billing.numbering import build_prefix, next_number, save_with_number

DAY = date(2026, 10, 19)


class NextNumberTest(TestCase):
    """
    Test cases for :func:`next_number`.
    """

    def test_prefix_format(self):
        self.assertEqual(build_prefix("FAC", DAY), "FAC-191026-")
        self.assertEqual(build_prefix("REC", date(2027, 1, 5)), "REC-050127-")

    def test_first_number_of_the_day(self):
        self.assertEqual(next_number(Invoice, "invoice_number", "FAC", day=DAY), "FAC-191026-0001")

    def test_follows_greatest_number_of_the_day(self):
        """
        The next number is derived from the greatest one of the day,
        ignoring other days, other tags and deleted numbers.
        """
        Invoice.objects.create(invoice_number="FAC-191026-0001", customer_name="A")
        Invoice.objects.create(invoice_number="FAC-191026-0007", customer_name="B")
        Invoice.objects.create(invoice_number="FAC-181026-0042", customer_name="C")
        Invoice.objects.create(invoice_number="AVO-191026-0099", customer_name="D")

        self.assertEqual(next_number(Invoice, "invoice_number", "FAC", day=DAY), "FAC-191026-0008")

    def test_sequence_is_gapless_and_increasing(self):
        """
        N sequential allocations on the same day yield 0001..N.
        """
        numbers = []
        for i in range(12):
            invoice = save_with_number(Invoice(customer_name=f"Client {i}"), "invoice_number", "FAC", day=DAY)
            numbers.append(invoice.invoice_number)

        self.assertEqual(numbers, [f"FAC-191026-{n:04d}" for n in range(1, 13)])
        self.assertEqual(numbers, sorted(numbers))


class SaveWithNumberTest(TestCase):
    """
    Test cases for the retry loop of :func:`save_with_number`.
    """

    def setUp(self):
        Invoice.objects.create(invoice_number="FAC-191026-0001", customer_name="Déjà là")

    def test_retries_when_number_is_taken(self):
        """
        A number taken by a concurrent writer is regenerated.
        """
        with patch(
            "billing.numbering.next_number",
            side_effect=["FAC-191026-0001", "FAC-191026-0002"],
        ) as gen:
            invoice = save_with_number(Invoice(customer_name="Nouveau"), "invoice_number", "FAC")

        self.assertEqual(gen.call_count, 2)
        self.assertEqual(invoice.invoice_number, "FAC-191026-0002")
        self.assertTrue(Invoice.objects.filter(pk=invoice.pk, customer_name="Nouveau").exists())

    def test_gives_up_after_budget(self):
        with patch("billing.numbering.next_number", return_value="FAC-191026-0001") as gen:
            with self.assertRaises(NumberAllocationError):
                save_with_number(Invoice(customer_name="Nouveau"), "invoice_number", "FAC", attempts=3)

        self.assertEqual(gen.call_count, 3)
        self.assertEqual(Invoice.objects.count(), 1)

    def test_other_integrity_errors_propagate(self):
        """
        A uniqueness violation on another column is not retried.
        """
        duplicate = Invoice(customer_name="Doublon")
        duplicate.pk = Invoice.objects.get().pk

        with patch("billing.numbering.next_number", return_value="FAC-191026-0002") as gen:
            with self.assertRaises(IntegrityError):
                save_with_number(duplicate, "invoice_number", "FAC")

        self.assertEqual(gen.call_count, 1)

    def test_counter_has_four_digits(self):
        """
        Past 9999 a day the counter widens and no longer sorts after
        the previous numbers, so allocation gives up.
        """
        Invoice.objects.create(invoice_number="FAC-191026-9999", customer_name="Dernier")
        self.assertEqual(next_number(Invoice, "invoice_number", "FAC", day=DAY), "FAC-191026-10000")

        Invoice.objects.create(invoice_number="FAC-191026-10000", customer_name="Hors format")
        with self.assertRaises(NumberAllocationError):
            save_with_number(Invoice(customer_name="Suivant"), "invoice_number", "FAC", attempts=2, day=DAY)
