# billing/tests/test_notifiers.py
"""
Test suite for receipt notifications.

This module provides unit tests for:
- The notifier factory.
- The SMSing gateway, with mocked HTTP calls.
- The signal handler, which never lets a failure escape.
"""

from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.utils import timezone
from requests.exceptions import ConnectionError as RequestsConnectionError

from billing.exceptions import NotificationError
from billing.models import Receipt
from billing.notifiers import (
    LocalReceiptNotifier,
    SMSingReceiptNotifier,
    format_phone_number,
    get_receipt_notifier,
    receipt_message,
)
from billing.signals import notify_receipt


class NotifierFactoryTest(TestCase):
    def test_local_by_default(self):
        self.assertIsInstance(get_receipt_notifier(), LocalReceiptNotifier)

    @override_settings(
        RECEIPT_NOTIFIER_BACKEND="smsing",
        SMSING_BASE_URL="http://sms.test/api",
        SMSING_API_KEY="k",
        SMSING_API_TOKEN="t",
        SMSING_FROM="ATELIER",
    )
    def test_smsing_from_settings(self):
        notifier = get_receipt_notifier()

        self.assertIsInstance(notifier, SMSingReceiptNotifier)
        self.assertEqual(notifier.base_url, "http://sms.test/api")
        self.assertEqual(notifier.api_key, "k")
        self.assertEqual(notifier.sender, "ATELIER")


class SMSingNotifierTest(TestCase):
    """
    Test cases for the SMSing gateway.

    Covers success, transport failures and rejected messages using
    mocked requests to the SMSing API.
    """

    def setUp(self):
        """
        Prepare a receipt and a configured gateway.
        """
        self.receipt = Receipt.objects.create(
            receipt_number="REC-191026-0001",
            customer_name="Aminata Traoré",
            customer_phone="07 01 02 03 04",
            amount=Decimal("10000"),
            payment_date=timezone.now(),
        )
        self.gw = SMSingReceiptNotifier(base_url="http://sms.test/api", api_key="k", api_token="t")

    def test_phone_numbers(self):
        self.assertEqual(format_phone_number("07 01 02 03 04"), "2250701020304")
        self.assertEqual(format_phone_number("+225 07 01 02 03 04"), "2250701020304")

    def test_message(self):
        message = receipt_message(self.receipt)
        self.assertIn("10 000 FCFA", message)
        self.assertIn("REC-191026-0001", message)

    def test_send(self):
        with patch("billing.notifiers.requests.get") as get:
            get.return_value.raise_for_status.return_value = None
            get.return_value.json.return_value = {"status": "queued", "group_id": "G1"}
            self.gw.send_receipt(self.receipt)

        get.assert_called_once()
        args, kwargs = get.call_args
        self.assertEqual(args[0], "http://sms.test/api")
        self.assertEqual(kwargs["params"]["to"], "2250701020304")
        self.assertEqual(kwargs["params"]["type"], "sms")
        self.assertEqual(kwargs["timeout"], 30)

    def test_transport_failure(self):
        with patch("billing.notifiers.requests.get", side_effect=RequestsConnectionError("down")):
            with self.assertRaises(NotificationError):
                self.gw.send_receipt(self.receipt)

    def test_rejected_message(self):
        with patch("billing.notifiers.requests.get") as get:
            get.return_value.raise_for_status.return_value = None
            get.return_value.json.return_value = {"status": "error", "message": "Crédit insuffisant"}
            with self.assertRaises(NotificationError) as ctx:
                self.gw.send_receipt(self.receipt)
        self.assertIn("Crédit insuffisant", str(ctx.exception))

    def test_missing_credentials(self):
        gw = SMSingReceiptNotifier(base_url="http://sms.test/api")
        with patch("billing.notifiers.requests.get") as get:
            with self.assertRaises(NotificationError):
                gw.send_receipt(self.receipt)
        get.assert_not_called()

    def test_no_phone_number(self):
        self.receipt.customer_phone = None
        with patch("billing.notifiers.requests.get") as get:
            self.gw.send_receipt(self.receipt)
        get.assert_not_called()

    def test_unexpected_response_body(self):
        with patch("billing.notifiers.requests.get") as get:
            get.return_value.raise_for_status.return_value = None
            get.return_value.json.return_value = ["queued"]
            with self.assertRaises(NotificationError):
                self.gw.send_receipt(self.receipt)

    def test_signal_handler_contains_unexpected_errors(self):
        with patch("billing.signals.get_receipt_notifier") as factory, patch("billing.signals.warn") as warn:
            factory.return_value.send_receipt.side_effect = OSError("disk full")
            with self.assertLogs("billing.signals", level="ERROR") as logs:
                notify_receipt(self.receipt.pk)

        warn.assert_not_called()
        self.assertIn("REC-191026-0001", logs.output[0])

    def test_signal_handler_reports_failures(self):
        with patch("billing.signals.get_receipt_notifier") as factory, patch("billing.signals.warn") as warn:
            factory.return_value.send_receipt.side_effect = NotificationError("down")
            notify_receipt(self.receipt.pk)

        warn.assert_called_once()
        self.assertIn("REC-191026-0001", warn.call_args[0][0])
