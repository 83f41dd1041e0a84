# billing/tests/test_pdf.py
"""
Tests for invoice and receipt PDF rendering.
"""

import tempfile
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

from django.test import TestCase

from billing.exceptions import PDFGenerationError
from billing.pdf import (
    format_amount,
    format_datetime,
    generate_invoice_pdf,
    generate_receipt_pdf,
    payment_method_label,
)
from billing.sync import sync_payment_to_invoice
from custom_orders.models import CustomOrderPayment

from .test_sync import OrderFixtureMixin


class FormattingTest(TestCase):
    """
    Test cases for the formatting helpers.
    """

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("23000")), "23 000 FCFA")
        self.assertEqual(format_amount(Decimal("1234567.50")), "1 234 568 FCFA")
        self.assertEqual(format_amount(0), "0 FCFA")
        self.assertEqual(format_amount(None), "0 FCFA")

    def test_format_datetime(self):
        # Africa/Abidjan is UTC+0 all year round
        value = datetime(2026, 10, 19, 14, 5, tzinfo=dt_timezone.utc)
        self.assertEqual(format_datetime(value), "19/10/2026 à 14:05")
        self.assertEqual(format_datetime(None), "")

    def test_payment_method_label(self):
        self.assertEqual(payment_method_label("CARD"), "Carte bancaire")
        self.assertEqual(payment_method_label("MOOV_MONEY"), "Moov Money")
        self.assertEqual(payment_method_label(None), "Espèces")
        self.assertEqual(payment_method_label("TROC"), "TROC")


class PdfRenderingTest(OrderFixtureMixin, TestCase):
    """
    Test cases for invoice and receipt rendering.

    Ensures that PDFs are produced and that rendering failures
    surface as :class:`PDFGenerationError`.
    """

    def setUp(self):
        super().setUp()
        payment = CustomOrderPayment.objects.create(
            order=self.order,
            amount=Decimal("10000"),
            payment_method="ORANGE_MONEY",
            received_by=self.staff,
        )
        result = sync_payment_to_invoice(payment.pk, self.order.pk, actor=self.staff)
        self.invoice = result.invoice
        self.receipt = result.receipt

    def test_generate_invoice_pdf(self):
        buffer = BytesIO()
        generate_invoice_pdf(self.invoice, buffer)

        self.assertTrue(buffer.getvalue().startswith(b"%PDF"))
        self.assertGreater(len(buffer.getvalue()), 100)

    def test_generate_invoice_pdf_on_disk(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "facture.pdf"
            generate_invoice_pdf(self.invoice, str(path))

            self.assertTrue(path.exists())
            self.assertGreater(path.stat().st_size, 100)

    def test_generate_receipt_pdf(self):
        buffer = BytesIO()
        generate_receipt_pdf(self.receipt, buffer)

        self.assertTrue(buffer.getvalue().startswith(b"%PDF"))

    def test_receipt_without_order(self):
        self.receipt.custom_order = None
        buffer = BytesIO()
        generate_receipt_pdf(self.receipt, buffer)

        self.assertTrue(buffer.getvalue().startswith(b"%PDF"))

    def test_rendering_failure(self):
        with patch("billing.pdf.canvas.Canvas", side_effect=OSError("disk full")):
            with self.assertRaises(PDFGenerationError):
                generate_invoice_pdf(self.invoice, BytesIO())
            with self.assertRaises(PDFGenerationError):
                generate_receipt_pdf(self.receipt, BytesIO())
