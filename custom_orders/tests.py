# custom_orders/tests.py
"""
Test suite for the custom orders application.

This module provides unit tests for:
- Order creation with its invoice and deposit.
- Payment recording and validation.
- The staff payment endpoints.
- The demo bootstrap command.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth.models import User
from django.core.management import call_command
from django.contrib import admin
from django.test import RequestFactory, TestCase, TransactionTestCase
from django.urls import reverse

from billing.exceptions import InvoiceSyncError
from billing.models import Invoice, InvoicePayment, Receipt
from customers.models import Customer

from .admin import CustomOrderAdmin
from .exceptions import InvalidPaymentAmount, InvalidPaymentMethod
from .models import CustomOrder, CustomOrderPayment
from .services import (
    create_custom_order,
    payment_summary,
    receive_payment,
    record_payment,
    set_order_status,
)

ITEMS = [
    {"garment_type": "Boubou", "custom_type": "Grand boubou", "quantity": 1, "unit_price": 10000},
    {"garment_type": "Chemise", "description": "Col mao", "quantity": 2, "unit_price": 5000},
]


class CustomOrderServiceTest(TestCase):
    """
    Test cases for the custom order services.
    """

    def setUp(self):
        """
        Prepare test fixtures.

        Creates a staff member, a customer and a 23 000 FCFA order
        (20 000 of garments and 3 000 of material).
        """
        self.staff = User.objects.create_user("awa", password="x", is_staff=True)
        self.customer = Customer.objects.create(name="Aminata Traoré", phone="0701020304")
        self.order = create_custom_order(
            self.customer, ITEMS, pickup_date=date(2026, 11, 2), material_cost=3000, actor=self.staff
        )

    def test_order_is_numbered_and_invoiced(self):
        self.assertTrue(self.order.order_number.startswith("SM-"))
        self.assertEqual(self.order.total_cost, Decimal("20000"))
        self.assertEqual(self.order.items.count(), 2)

        invoice = Invoice.objects.get(custom_order=self.order)
        self.assertEqual(invoice.total, Decimal("23000"))
        self.assertEqual(invoice.status, Invoice.Status.SENT)
        self.assertTrue(self.order.timeline.filter(event="Commande créée").exists())

    def test_order_with_deposit(self):
        order = create_custom_order(
            self.customer,
            ITEMS,
            pickup_date=date(2026, 11, 2),
            material_cost=3000,
            deposit=5000,
            deposit_method="WAVE",
            actor=self.staff,
        )

        payment = order.payments.get()
        self.assertEqual(payment.payment_type, CustomOrderPayment.PaymentType.DEPOSIT)
        self.assertIsNotNone(payment.invoice_payment_id)
        self.assertTrue(Receipt.objects.filter(custom_order_payment=payment).exists())
        invoice = Invoice.objects.get(custom_order=order)
        self.assertEqual(invoice.status, Invoice.Status.PARTIAL)
        self.assertEqual(invoice.amount_paid, Decimal("5000"))
        self.assertTrue(order.timeline.filter(event="Paiement reçu: Avance").exists())

    def test_invalid_amounts(self):
        for amount in (0, -5, "abc", None, "NaN"):
            with self.assertRaises(InvalidPaymentAmount):
                record_payment(self.order, amount)
        self.assertFalse(self.order.payments.exists())

    def test_unknown_method_is_rejected(self):
        with self.assertRaises(InvalidPaymentMethod):
            record_payment(self.order, 1000, payment_method="BITCOIN")

    def test_settling_payment_becomes_final(self):
        first = record_payment(self.order, 10000, payment_method="CASH")
        last = record_payment(self.order, 13000, payment_method="CASH")

        self.assertEqual(first.payment_type, CustomOrderPayment.PaymentType.INSTALLMENT)
        self.assertEqual(last.payment_type, CustomOrderPayment.PaymentType.FINAL)

    def test_payment_summary(self):
        record_payment(self.order, 8000)

        summary = payment_summary(self.order)

        self.assertEqual(summary["total_cost"], Decimal("23000"))
        self.assertEqual(summary["total_paid"], Decimal("8000"))
        self.assertEqual(summary["balance"], Decimal("15000"))
        self.assertFalse(summary["is_paid_in_full"])

    def test_sync_failure_keeps_payment(self):
        with patch(
            "custom_orders.services.sync_payment_to_invoice",
            side_effect=InvoiceSyncError("indisponible"),
        ):
            payment, receipt, summary = receive_payment(self.order, 2000, actor=self.staff)

        self.assertIsNone(receipt)
        self.assertTrue(CustomOrderPayment.objects.filter(pk=payment.pk).exists())
        self.assertEqual(summary["total_paid"], Decimal("2000"))

    def test_status_change_is_logged_once(self):
        set_order_status(self.order, CustomOrder.Status.IN_PRODUCTION, actor=self.staff)
        set_order_status(self.order, CustomOrder.Status.IN_PRODUCTION, actor=self.staff)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, CustomOrder.Status.IN_PRODUCTION)
        self.assertEqual(self.order.timeline.filter(event="Statut changé").count(), 1)

    def test_unknown_status(self):
        with self.assertRaises(ValueError):
            set_order_status(self.order, "LOST")


class PaymentEndpointsTest(TestCase):
    """
    Test cases for the staff payment endpoints.
    """

    def setUp(self):
        self.staff = User.objects.create_user("awa", password="x", is_staff=True)
        customer = Customer.objects.create(name="Aminata Traoré", phone="0701020304")
        self.order = create_custom_order(
            customer, ITEMS, pickup_date=date(2026, 11, 2), material_cost=3000, actor=self.staff
        )
        self.url = reverse("custom_orders:payments", args=[self.order.pk])
        self.client.force_login(self.staff)

    def test_record_payment(self):
        resp = self.client.post(self.url, {"amount": "10000", "payment_method": "ORANGE_MONEY"})

        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertTrue(data["receipt"]["receipt_number"].startswith("REC-"))
        self.assertEqual(data["summary"]["balance"], 13000.0)
        self.assertFalse(data["summary"]["is_paid_in_full"])
        self.assertEqual(InvoicePayment.objects.get().payment_method, "ORANGE_MONEY")

        entry = self.order.timeline.get(event="Paiement reçu: Acompte")
        self.assertIn("10 000 FCFA reçu via Orange Money", entry.description)
        self.assertIn("Reste: 13 000 FCFA", entry.description)

    def test_full_payment(self):
        resp = self.client.post(self.url, {"amount": "23000", "payment_method": "CASH"})

        data = resp.json()
        self.assertEqual(data["payment"]["payment_type"], "FINAL")
        self.assertEqual(data["message"], "Paiement complet!")
        self.assertEqual(Invoice.objects.get(custom_order=self.order).status, Invoice.Status.PAID)

    def test_list_payments(self):
        self.client.post(self.url, {"amount": "5000"})

        resp = self.client.get(self.url)

        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(len(data["payments"]), 1)
        self.assertIsNotNone(data["payments"][0]["receipt_number"])
        self.assertIsNone(data["payments"][0]["payment_method"])
        self.assertEqual(data["summary"]["total_paid"], 5000.0)

    def test_invalid_form(self):
        for payload in ({"amount": "0"}, {"amount": "abc"}, {"amount": "100", "payment_method": "BITCOIN"}):
            resp = self.client.post(self.url, payload)
            self.assertEqual(resp.status_code, 400)
        self.assertFalse(CustomOrderPayment.objects.exists())

    def test_sync_failure_returns_null_receipt(self):
        with patch(
            "custom_orders.services.sync_payment_to_invoice",
            side_effect=InvoiceSyncError("indisponible"),
        ):
            resp = self.client.post(self.url, {"amount": "5000"})

        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.json()["receipt"])
        self.assertEqual(CustomOrderPayment.objects.count(), 1)

    def test_delete_payment(self):
        self.client.post(self.url, {"amount": "10000"})
        payment_id = self.client.post(self.url, {"amount": "13000"}).json()["payment"]["id"]

        resp = self.client.post(
            reverse("custom_orders:delete_payment", args=[self.order.pk, payment_id])
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["summary"]["balance"], 13000.0)
        self.assertFalse(CustomOrderPayment.objects.filter(pk=payment_id).exists())
        self.assertEqual(Receipt.objects.count(), 1)
        invoice = Invoice.objects.get(custom_order=self.order)
        self.assertEqual(invoice.status, Invoice.Status.PARTIAL)
        self.assertIsNone(invoice.paid_date)
        entry = self.order.timeline.get(event="Paiement supprimé")
        self.assertEqual(entry.description, "Paiement de 13 000 FCFA annulé")

    def test_delete_payment_of_another_order(self):
        other = create_custom_order(
            Customer.objects.create(phone="0505050505"), ITEMS, pickup_date=date(2026, 11, 2)
        )
        payment_id = self.client.post(self.url, {"amount": "1000"}).json()["payment"]["id"]

        resp = self.client.post(reverse("custom_orders:delete_payment", args=[other.pk, payment_id]))

        self.assertEqual(resp.status_code, 404)
        self.assertTrue(CustomOrderPayment.objects.filter(pk=payment_id).exists())

    def test_delete_requires_post(self):
        resp = self.client.get(reverse("custom_orders:delete_payment", args=[self.order.pk, 1]))
        self.assertEqual(resp.status_code, 405)

    def test_unknown_order(self):
        resp = self.client.get(reverse("custom_orders:payments", args=[999999]))
        self.assertEqual(resp.status_code, 404)

    def test_staff_only(self):
        User.objects.create_user("cliente", password="x")
        self.client.logout()
        self.client.login(username="cliente", password="x")

        resp = self.client.post(self.url, {"amount": "1000"})

        self.assertEqual(resp.status_code, 302)
        self.assertFalse(CustomOrderPayment.objects.exists())


class BootstrapDemoTests(TestCase):
    def test_demo_order_is_invoiced(self):
        call_command("bootstrap_demo")
        call_command("bootstrap_demo")

        order = CustomOrder.objects.get()
        invoice = order.invoice
        assert invoice.total == Decimal("23000")
        assert invoice.status == Invoice.Status.PARTIAL
        assert invoice.amount_paid == Decimal("10000")
        assert Receipt.objects.count() == 1
        assert User.objects.get(username="admin").is_staff


class CustomOrderAdminTest(TestCase):
    """
    Test cases for the custom order admin.

    Orders must be created through the services so that they are
    numbered and invoiced.
    """

    def setUp(self):
        self.admin_user = User.objects.create_superuser("admin", "admin@example.org", "x")
        self.client.force_login(self.admin_user)
        self.customer = Customer.objects.create(name="Aminata Traoré", phone="0701020304")
        self.order = create_custom_order(
            self.customer, ITEMS, pickup_date=date(2026, 11, 2), material_cost=3000
        )

    def test_add_is_refused(self):
        url = reverse("admin:custom_orders_customorder_add")
        payload = {
            "customer": self.customer.pk,
            "pickup_date": "2026-11-02",
            "status": CustomOrder.Status.PENDING,
            "notes": "",
        }

        self.assertEqual(self.client.get(url).status_code, 403)
        for _ in range(2):
            self.assertEqual(self.client.post(url, payload).status_code, 403)

        self.assertEqual(CustomOrder.objects.count(), 1)
        self.assertFalse(CustomOrder.objects.filter(order_number="").exists())

    def test_change_page_keeps_amounts_read_only(self):
        resp = self.client.get(reverse("admin:custom_orders_customorder_change", args=[self.order.pk]))

        self.assertEqual(resp.status_code, 200)
        form_fields = resp.context["adminform"].form.fields
        self.assertNotIn("total_cost", form_fields)
        self.assertNotIn("material_cost", form_fields)
        self.assertIn("status", form_fields)

    def test_status_change_is_logged(self):
        model_admin = CustomOrderAdmin(CustomOrder, admin.site)
        request = RequestFactory().post("/")
        request.user = self.admin_user
        form_class = model_admin.get_form(request, self.order, change=True)
        form = form_class(
            {"pickup_date": "2026-11-02", "status": CustomOrder.Status.READY, "notes": ""},
            instance=self.order,
        )
        self.assertTrue(form.is_valid(), form.errors)

        model_admin.save_model(request, form.save(commit=False), form, change=True)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, CustomOrder.Status.READY)
        self.assertEqual(self.order.timeline.filter(event="Statut changé").count(), 1)


class NotificationFailureTest(TransactionTestCase):
    """
    A notifier failing after the payment is committed must not
    interrupt the payment flow.

    Uses real commits so that receipt notifications run as soon as
    the synchronization commits.
    """

    def test_payment_survives_notifier_crash(self):
        customer = Customer.objects.create(name="Aminata Traoré", phone="0701020304")
        order = create_custom_order(customer, ITEMS, pickup_date=date(2026, 11, 2), material_cost=3000)

        with patch("billing.signals.get_receipt_notifier") as factory:
            factory.return_value.send_receipt.side_effect = OSError("disk full")
            payment, receipt, summary = receive_payment(order, 10000, payment_method="CASH")

        factory.return_value.send_receipt.assert_called_once()
        self.assertIsNotNone(receipt)
        self.assertTrue(CustomOrderPayment.objects.filter(pk=payment.pk).exists())
        self.assertEqual(summary["total_paid"], Decimal("10000"))
        self.assertTrue(order.timeline.filter(event="Paiement reçu: Acompte").exists())
