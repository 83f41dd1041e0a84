# billing/tests/test_sync.py
"""
Test suite for the order to billing reconciliation.

This module provides unit tests for:
- Invoice materialization from a custom order.
- Payment synchronization, receipts and status reconciliation.
- Deletion of payments and the rows derived from them.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.db.models import Sum
from django.test import TestCase

from billing import sync
from billing.exceptions import CustomOrderNotFound, NumberAllocationError, PaymentNotFound
from billing.models import Invoice, InvoicePayment, Receipt
from billing.sync import (
    create_invoice_from_custom_order,
    delete_payment_and_sync,
    invoice_status_for,
    map_payment_method,
    payment_reference,
    sync_payment_to_invoice,
    update_invoice_amount_and_status,
)
from custom_orders.models import CustomOrder, CustomOrderItem, CustomOrderPayment
from customers.models import Customer


class OrderFixtureMixin:
    """
    Shared fixtures: a staff member, a customer and an order of
    two garments (10 000 x 1 and 5 000 x 2) with 3 000 of material.
    """

    def setUp(self):
        self.staff = User.objects.create_user(
            "awa", password="x", is_staff=True, first_name="Awa", last_name="Koné"
        )
        self.customer = Customer.objects.create(
            name="Aminata Traoré",
            phone="0701020304",
            email="aminata@example.org",
            city="Abidjan",
            country="Côte d'Ivoire",
        )
        self.order = CustomOrder.objects.create(
            order_number="SM-191026-0001",
            customer=self.customer,
            pickup_date=date(2026, 11, 2),
            total_cost=Decimal("20000"),
            material_cost=Decimal("3000"),
            created_by=self.staff,
        )
        CustomOrderItem.objects.create(
            order=self.order,
            garment_type="Boubou",
            custom_type="Grand boubou",
            quantity=1,
            unit_price=Decimal("10000"),
        )
        CustomOrderItem.objects.create(
            order=self.order,
            garment_type="Chemise",
            description="Col mao",
            quantity=2,
            unit_price=Decimal("5000"),
        )

    def pay(self, amount, method=None, order=None):
        return CustomOrderPayment.objects.create(
            order=order or self.order,
            amount=Decimal(amount),
            payment_method=method,
            received_by=self.staff,
        )


class InvoiceMaterializerTest(OrderFixtureMixin, TestCase):
    """
    Test cases for :func:`create_invoice_from_custom_order`.
    """

    def test_invoice_mirrors_order(self):
        """
        Validate totals, items and snapshot of a new invoice.
        """
        invoice = create_invoice_from_custom_order(self.order.pk, actor=self.staff)

        self.assertTrue(invoice.invoice_number.startswith("FAC-"))
        self.assertEqual(invoice.custom_order, self.order)
        self.assertEqual(invoice.subtotal, Decimal("20000"))
        self.assertEqual(invoice.total, Decimal("23000"))
        self.assertEqual(invoice.amount_paid, 0)
        self.assertEqual(invoice.tax, 0)
        self.assertEqual(invoice.status, Invoice.Status.SENT)
        self.assertEqual(invoice.due_date, date(2026, 11, 2))
        self.assertEqual(invoice.issue_date, self.order.order_date)
        self.assertEqual(invoice.notes, "Commande sur-mesure N° SM-191026-0001")
        self.assertEqual(invoice.customer_name, "Aminata Traoré")
        self.assertEqual(invoice.customer_phone, "0701020304")
        self.assertEqual(invoice.customer_address, "Abidjan, Côte d'Ivoire")

        items = list(invoice.items.values_list("description", "quantity", "unit_price", "total"))
        self.assertEqual(
            items,
            [
                ("Boubou - Grand boubou", 1, Decimal("10000"), Decimal("10000")),
                ("Chemise: Col mao", 2, Decimal("5000"), Decimal("10000")),
                ("Coût matériel (tissu, accessoires)", 1, Decimal("3000"), Decimal("3000")),
            ],
        )

    def test_is_idempotent(self):
        first = create_invoice_from_custom_order(self.order.pk)
        second = create_invoice_from_custom_order(self.order.pk)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(Invoice.objects.count(), 1)
        self.assertEqual(second.items.count(), 3)

    def test_no_material_line_without_material_cost(self):
        self.order.material_cost = 0
        self.order.save()

        invoice = create_invoice_from_custom_order(self.order.pk)

        self.assertEqual(invoice.total, Decimal("20000"))
        self.assertEqual(invoice.items.count(), 2)

    def test_anonymous_customer_snapshot(self):
        self.customer.name = ""
        self.customer.city = ""
        self.customer.country = ""
        self.customer.email = None
        self.customer.save()

        invoice = create_invoice_from_custom_order(self.order.pk)

        self.assertEqual(invoice.customer_name, "Client")
        self.assertIsNone(invoice.customer_address)
        self.assertIsNone(invoice.customer_email)

    def test_snapshot_is_not_refreshed(self):
        invoice = create_invoice_from_custom_order(self.order.pk)
        self.customer.name = "Autre nom"
        self.customer.save()

        invoice.refresh_from_db()
        self.assertEqual(invoice.customer_name, "Aminata Traoré")

    def test_unknown_order(self):
        with self.assertRaises(CustomOrderNotFound) as ctx:
            create_invoice_from_custom_order(999999)
        self.assertEqual(str(ctx.exception), "Commande sur-mesure non trouvée")

    def test_concurrent_creation_returns_winner(self):
        """
        When another request links an invoice to the order between the
        existence check and the insert, its invoice is returned.
        """
        describe = sync._item_description

        def racing(item):
            if not Invoice.objects.filter(custom_order=self.order).exists():
                Invoice.objects.create(
                    invoice_number="FAC-191026-0900",
                    custom_order=self.order,
                    customer_name="Concurrent",
                )
            return describe(item)

        with patch("billing.sync._item_description", side_effect=racing):
            invoice = create_invoice_from_custom_order(self.order.pk)

        self.assertEqual(invoice.invoice_number, "FAC-191026-0900")
        self.assertEqual(Invoice.objects.count(), 1)


class StatusTest(TestCase):
    """
    Test cases for the pure status function and method mapping.
    """

    def test_status_for_amounts(self):
        total = Decimal("23000")
        self.assertEqual(invoice_status_for(Decimal("0"), total), Invoice.Status.SENT)
        self.assertEqual(invoice_status_for(Decimal("1"), total), Invoice.Status.PARTIAL)
        self.assertEqual(invoice_status_for(Decimal("22999.99"), total), Invoice.Status.PARTIAL)
        self.assertEqual(invoice_status_for(Decimal("23000"), total), Invoice.Status.PAID)
        self.assertEqual(invoice_status_for(Decimal("30000"), total), Invoice.Status.PAID)

    def test_method_mapping(self):
        self.assertEqual(map_payment_method("CARD"), InvoicePayment.Method.PAIEMENTPRO)
        self.assertEqual(map_payment_method("WAVE"), InvoicePayment.Method.WAVE)
        self.assertEqual(map_payment_method("MTN_MOBILE_MONEY"), InvoicePayment.Method.MTN_MOBILE_MONEY)
        self.assertEqual(map_payment_method("CHECK"), InvoicePayment.Method.CHECK)

    def test_unknown_method_defaults_to_cash(self):
        for source in (None, "", "BITCOIN", "cash"):
            self.assertEqual(map_payment_method(source), InvoicePayment.Method.CASH)

    def test_payment_reference(self):
        self.assertEqual(payment_reference(42), "CP-00000042")
        self.assertEqual(payment_reference(123456789), "CP-23456789")

    def test_reconcile_missing_invoice_is_noop(self):
        update_invoice_amount_and_status(999999)


class PaymentSyncTest(OrderFixtureMixin, TestCase):
    """
    Test cases for :func:`sync_payment_to_invoice` and
    :func:`delete_payment_and_sync`.
    """

    def test_example_scenario(self):
        """
        Pay 10 000 then 13 000 on a 23 000 invoice, then delete the
        second payment.
        """
        first = self.pay("10000", "CASH")
        result = sync_payment_to_invoice(first.pk, self.order.pk, actor=self.staff)
        self.assertEqual(result.invoice.status, Invoice.Status.PARTIAL)
        self.assertEqual(result.invoice.amount_paid, Decimal("10000"))
        self.assertIsNone(result.invoice.paid_date)

        second = self.pay("13000", "WAVE")
        result = sync_payment_to_invoice(second.pk, self.order.pk, actor=self.staff)
        self.assertEqual(result.invoice.status, Invoice.Status.PAID)
        self.assertEqual(result.invoice.amount_paid, Decimal("23000"))
        self.assertIsNotNone(result.invoice.paid_date)

        delete_payment_and_sync(second.pk)
        invoice = Invoice.objects.get(custom_order=self.order)
        self.assertEqual(invoice.status, Invoice.Status.PARTIAL)
        self.assertEqual(invoice.amount_paid, Decimal("10000"))
        self.assertIsNone(invoice.paid_date)

    def test_sync_creates_invoice_payment_and_receipt(self):
        payment = self.pay("5000", "CARD")

        result = sync_payment_to_invoice(payment.pk, self.order.pk, actor=self.staff)

        payment.refresh_from_db()
        self.assertEqual(payment.invoice_payment_id, result.invoice_payment_id)
        invoice_payment = result.invoice_payment
        self.assertEqual(invoice_payment.amount, Decimal("5000"))
        self.assertEqual(invoice_payment.payment_method, InvoicePayment.Method.PAIEMENTPRO)
        self.assertEqual(invoice_payment.reference, payment_reference(payment.pk))
        self.assertEqual(invoice_payment.paid_at, payment.paid_at)

        receipt = Receipt.objects.get(pk=result.receipt_id)
        self.assertTrue(receipt.receipt_number.startswith("REC-"))
        self.assertEqual(receipt.custom_order_payment, payment)
        self.assertEqual(receipt.invoice_payment, invoice_payment)
        self.assertEqual(receipt.invoice, result.invoice)
        self.assertEqual(receipt.custom_order, self.order)
        self.assertEqual(receipt.customer_name, "Aminata Traoré")
        self.assertEqual(receipt.customer_phone, "0701020304")
        self.assertEqual(receipt.amount, Decimal("5000"))
        self.assertEqual(receipt.payment_method, "CARD")
        self.assertEqual(receipt.payment_date, payment.paid_at)
        self.assertEqual(receipt.created_by_name, "Awa Koné")

    def test_receipt_defaults_to_cash(self):
        payment = self.pay("5000")

        result = sync_payment_to_invoice(payment.pk, self.order.pk)

        self.assertEqual(result.receipt.payment_method, "CASH")
        self.assertEqual(result.invoice_payment.payment_method, InvoicePayment.Method.CASH)

    def test_invoice_is_created_lazily(self):
        self.assertFalse(Invoice.objects.exists())

        sync_payment_to_invoice(self.pay("1000").pk, self.order.pk)

        self.assertEqual(Invoice.objects.filter(custom_order=self.order).count(), 1)

    def test_already_synced_payment_is_not_duplicated(self):
        payment = self.pay("7000", "WAVE")
        first = sync_payment_to_invoice(payment.pk, self.order.pk)
        second = sync_payment_to_invoice(payment.pk, self.order.pk)

        self.assertEqual(first.invoice_payment_id, second.invoice_payment_id)
        self.assertEqual(first.receipt_id, second.receipt_id)
        self.assertEqual(InvoicePayment.objects.count(), 1)
        self.assertEqual(Receipt.objects.count(), 1)

    def test_unknown_payment(self):
        with self.assertRaises(PaymentNotFound) as ctx:
            sync_payment_to_invoice(999999, self.order.pk)
        self.assertEqual(str(ctx.exception), "Paiement non trouvé")
        self.assertFalse(Invoice.objects.exists())

    def test_payment_of_another_order(self):
        other = CustomOrder.objects.create(
            order_number="SM-191026-0002",
            customer=self.customer,
            pickup_date=date(2026, 11, 9),
        )
        payment = self.pay("1000", order=other)

        with self.assertRaises(PaymentNotFound):
            sync_payment_to_invoice(payment.pk, self.order.pk)
        self.assertFalse(InvoicePayment.objects.exists())

    def test_failure_rolls_back_the_whole_chain(self):
        """
        A receipt that cannot be numbered leaves no invoice, no
        invoice payment and no link behind.
        """
        payment = self.pay("1000")

        with patch("billing.sync.emit_receipt", side_effect=NumberAllocationError("plein")):
            with self.assertRaises(NumberAllocationError):
                sync_payment_to_invoice(payment.pk, self.order.pk)

        payment.refresh_from_db()
        self.assertIsNone(payment.invoice_payment_id)
        self.assertFalse(InvoicePayment.objects.exists())
        self.assertFalse(Invoice.objects.exists())
        self.assertFalse(Receipt.objects.exists())

    def test_delete_cascades_to_billing_rows(self):
        payment = self.pay("4000")
        result = sync_payment_to_invoice(payment.pk, self.order.pk)

        delete_payment_and_sync(payment.pk)

        self.assertFalse(CustomOrderPayment.objects.filter(pk=payment.pk).exists())
        self.assertFalse(InvoicePayment.objects.filter(pk=result.invoice_payment_id).exists())
        self.assertFalse(Receipt.objects.filter(pk=result.receipt_id).exists())
        self.assertTrue(CustomOrder.objects.filter(pk=self.order.pk).exists())
        invoice = Invoice.objects.get(pk=result.invoice.pk)
        self.assertEqual(invoice.amount_paid, 0)
        self.assertEqual(invoice.status, Invoice.Status.SENT)

    def test_delete_unsynced_payment(self):
        payment = self.pay("4000")

        delete_payment_and_sync(payment.pk)

        self.assertFalse(CustomOrderPayment.objects.exists())

    def test_delete_missing_payment_is_noop(self):
        delete_payment_and_sync(999999)

    def test_amount_paid_tracks_payments(self):
        """
        After any sequence of syncs and deletions, ``amount_paid``
        equals the sum of the invoice payments.
        """
        payments = [self.pay(amount) for amount in ("1000", "2500", "4000", "7000", "9000")]
        operations = [
            ("sync", 0), ("sync", 1), ("sync", 2), ("delete", 1),
            ("sync", 3), ("delete", 0), ("sync", 4), ("delete", 4),
        ]
        for op, index in operations:
            if op == "sync":
                sync_payment_to_invoice(payments[index].pk, self.order.pk)
            else:
                delete_payment_and_sync(payments[index].pk)

            invoice = Invoice.objects.get(custom_order=self.order)
            expected = invoice.payments.aggregate(total=Sum("amount"))["total"] or Decimal("0")
            self.assertEqual(invoice.amount_paid, expected)
            self.assertEqual(invoice.status, invoice_status_for(expected, invoice.total))
            self.assertEqual(invoice.paid_date is not None, invoice.status == Invoice.Status.PAID)

        self.assertEqual(Invoice.objects.get(custom_order=self.order).amount_paid, Decimal("11000"))

    def test_notification_waits_for_commit(self):
        with patch("billing.signals.get_receipt_notifier") as factory:
            with self.captureOnCommitCallbacks(execute=True):
                sync_payment_to_invoice(self.pay("1000").pk, self.order.pk)

        factory.return_value.send_receipt.assert_called_once()

    def test_no_notification_for_rolled_back_sync(self):
        with patch("billing.sync.update_invoice_amount_and_status", side_effect=DatabaseError("boom")):
            with self.captureOnCommitCallbacks() as callbacks:
                with self.assertRaises(DatabaseError):
                    sync_payment_to_invoice(self.pay("1000").pk, self.order.pk)

        self.assertEqual(callbacks, [])
