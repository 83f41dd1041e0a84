# billing/notifiers.py
"""
Receipt notification gateways.

This module defines how customers are told that a payment was
received. Two gateways are provided:

- LocalReceiptNotifier: writes the message to the application
  journal only. Used in development and tests.
- SMSingReceiptNotifier: sends an SMS through the SMSing HTTP API.

A factory function `get_receipt_notifier` selects the gateway
based on Django settings.
"""

from dataclasses import dataclass
from typing import Protocol
import logging
import re

import requests
from requests.exceptions import RequestException
from django.conf import settings

from monitoring.html_logger import info
from .exceptions import NotificationError
from .models import Receipt
from .pdf import format_amount, format_datetime

logger = logging.getLogger(__name__)

COUNTRY_CODE = "225"


def receipt_message(receipt: Receipt) -> str:
    """
    Build the text sent to the customer for a receipt.

    Parameters
    ----------
    receipt : Receipt
        The receipt just issued.

    Returns
    -------
    str
        A short French message with the amount, date and number.
    """
    message = (
        f"{settings.ATELIER_NAME}: paiement de {format_amount(receipt.amount)} "
        f"reçu le {format_datetime(receipt.payment_date)}. "
        f"Reçu N° {receipt.receipt_number}."
    )
    invoice = receipt.invoice
    if invoice is not None and invoice.balance > 0:
        message += f" Reste à payer: {format_amount(invoice.balance)}."
    return message


def format_phone_number(phone: str) -> str:
    """
    Normalize a phone number to the international format without ``+``.

    Non-digits are dropped and the Côte d'Ivoire country code is
    prepended when missing.
    """
    digits = re.sub(r"\D", "", phone or "")
    if digits.startswith(COUNTRY_CODE):
        return digits
    return f"{COUNTRY_CODE}{digits}"


class ReceiptNotifier(Protocol):
    """
    Protocol for receipt notifiers.

    Any notifier must implement a method sending the
    notification of one receipt.
    """

    def send_receipt(self, receipt: Receipt) -> None:
        """
        Notify the customer of a receipt.

        Parameters
        ----------
        receipt : Receipt
            The receipt to notify.

        Raises
        ------
        NotificationError
            If the notification could not be delivered.
        """
        ...


# ---------------------------------------------------------------------------
# Local backend (journal only)
# ---------------------------------------------------------------------------
@dataclass
class LocalReceiptNotifier:
    """
    Local notifier implementation.

    Records the message in the application journal without
    contacting any external service.
    """

    def send_receipt(self, receipt: Receipt) -> None:
        info(f"Notification locale pour {receipt.customer_phone or 'n/a'}: {receipt_message(receipt)}")


# ---------------------------------------------------------------------------
# SMSing backend (remote HTTP calls)
# ---------------------------------------------------------------------------
@dataclass
class SMSingReceiptNotifier:
    """
    SMSing notifier implementation.

    Sends the receipt message as an SMS through the SMSing API.

    Attributes
    ----------
    base_url : str
        Base URL of the SMSing API.
    api_key, api_token : str
        SMSing credentials.
    sender : str
        Sender name shown on the customer's phone.
    timeout : int
        HTTP timeout in seconds.
    """

    base_url: str | None = None
    api_key: str | None = None
    api_token: str | None = None
    sender: str = "ATELIER"
    timeout: int = 30

    def _require_credentials(self) -> tuple[str, str]:
        """
        Ensure the credentials are configured.

        Raises
        ------
        NotificationError
            If the API key or token is missing.
        """
        if not self.api_key or not self.api_token:
            raise NotificationError("SMSING_API_KEY / SMSING_API_TOKEN are not configured")
        return self.api_key, self.api_token

    def send_receipt(self, receipt: Receipt) -> None:
        """
        Send the receipt message by SMS.

        Receipts without a phone number are skipped.

        Raises
        ------
        NotificationError
            If the HTTP call fails or SMSing rejects the message.
        """
        if not receipt.customer_phone:
            logger.info("Receipt %s has no phone number, SMS skipped", receipt.receipt_number)
            return

        api_key, api_token = self._require_credentials()
        params = {
            "sendsms": "",
            "apikey": api_key,
            "apitoken": api_token,
            "type": "sms",
            "from": self.sender,
            "to": format_phone_number(receipt.customer_phone),
            "text": receipt_message(receipt),
        }

        try:
            resp = requests.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (RequestException, ValueError) as exc:
            logger.exception("SMSing send failed for receipt %s", receipt.receipt_number)
            raise NotificationError("Échec de l'envoi du SMS de reçu") from exc

        if not isinstance(data, dict):
            raise NotificationError(f"Réponse SMSing inattendue: {data!r}")

        status = data.get("status")
        if status not in ("queued", "success"):
            raise NotificationError(f"SMS refusé par SMSing: {data.get('message') or status}")

        info(f"SMS de reçu {receipt.receipt_number} envoyé (groupe={data.get('group_id', 'n/a')}).")


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def get_receipt_notifier() -> ReceiptNotifier:
    """
    Factory to return the configured receipt notifier.

    Returns
    -------
    ReceiptNotifier
        Either an SMSingReceiptNotifier or a LocalReceiptNotifier
        instance depending on the RECEIPT_NOTIFIER_BACKEND setting.
    """
    backend = getattr(settings, "RECEIPT_NOTIFIER_BACKEND", "local")
    if backend == "smsing":
        return SMSingReceiptNotifier(
            base_url=settings.SMSING_BASE_URL,
            api_key=settings.SMSING_API_KEY,
            api_token=settings.SMSING_API_TOKEN,
            sender=settings.SMSING_FROM,
        )
    return LocalReceiptNotifier()
