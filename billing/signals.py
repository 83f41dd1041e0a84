# billing/signals.py
"""
Signals for the billing application.

This module notifies customers when a receipt is issued. The
notification runs once the surrounding transaction commits, so a
synchronization rolled back never produces a message.
"""

from functools import partial
import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from monitoring.html_logger import warn
from .exceptions import NotificationError
from .models import Receipt
from .notifiers import get_receipt_notifier

logger = logging.getLogger(__name__)


def notify_receipt(receipt_id: int):
    """
    Send the notification of a receipt.

    Failures are reported in the journal and never propagate: the
    payment is already recorded at this point.

    Parameters
    ----------
    receipt_id : int
        Primary key of the receipt.
    """
    receipt = Receipt.objects.select_related("invoice").filter(pk=receipt_id).first()
    if receipt is None:
        return
    try:
        get_receipt_notifier().send_receipt(receipt)
    except NotificationError as exc:
        warn(f"Notification du reçu {receipt.receipt_number} impossible: {exc}")
    except Exception:
        # logger only, the journal may be unavailable
        logger.exception("Unexpected failure notifying receipt %s", receipt.receipt_number)


@receiver(post_save, sender=Receipt)
def schedule_receipt_notification(sender, instance: Receipt, created, **kwargs):
    """
    Schedule the notification of a newly issued receipt.

    Parameters
    ----------
    sender : Model
        The model class sending the signal (Receipt).
    instance : Receipt
        The receipt instance that was saved.
    created : bool
        Whether the row was just inserted.
    **kwargs : dict
        Additional arguments provided by the signal.
    """
    if created:
        transaction.on_commit(partial(notify_receipt, instance.pk), robust=True)
