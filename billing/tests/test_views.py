# billing/tests/test_views.py
"""
Tests for the PDF download views.
"""

from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from billing.exceptions import PDFGenerationError
from billing.sync import sync_payment_to_invoice
from custom_orders.models import CustomOrderPayment

from .test_sync import OrderFixtureMixin


class DocumentDownloadTest(OrderFixtureMixin, TestCase):
    """
    Test cases for invoice and receipt downloads.

    Ensures documents are served as attachments to staff only.
    """

    def setUp(self):
        super().setUp()
        payment = CustomOrderPayment.objects.create(
            order=self.order, amount=Decimal("10000"), received_by=self.staff
        )
        result = sync_payment_to_invoice(payment.pk, self.order.pk)
        self.invoice = result.invoice
        self.receipt = result.receipt
        self.client.force_login(self.staff)

    def test_invoice_pdf(self):
        resp = self.client.get(reverse("billing:invoice_pdf", args=[self.invoice.pk]))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertEqual(
            resp["Content-Disposition"],
            f'attachment; filename="{self.invoice.invoice_number}.pdf"',
        )
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_receipt_pdf(self):
        resp = self.client.get(reverse("billing:receipt_pdf", args=[self.receipt.pk]))

        self.assertEqual(resp.status_code, 200)
        self.assertIn(self.receipt.receipt_number, resp["Content-Disposition"])

    def test_unknown_document(self):
        resp = self.client.get(reverse("billing:invoice_pdf", args=[999999]))
        self.assertEqual(resp.status_code, 404)

    def test_rendering_failure(self):
        with patch("billing.views.generate_invoice_pdf", side_effect=PDFGenerationError("boom")):
            resp = self.client.get(reverse("billing:invoice_pdf", args=[self.invoice.pk]))

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"], "boom")

    def test_staff_only(self):
        User.objects.create_user("cliente", password="x")
        self.client.logout()
        self.client.login(username="cliente", password="x")

        resp = self.client.get(reverse("billing:invoice_pdf", args=[self.invoice.pk]))

        self.assertEqual(resp.status_code, 302)

    def test_post_not_allowed(self):
        resp = self.client.post(reverse("billing:receipt_pdf", args=[self.receipt.pk]))
        self.assertEqual(resp.status_code, 405)
