# custom_orders/services.py
"""
Business operations on custom orders.

Views and the admin go through these functions rather than
writing rows themselves, so that every order gets its number,
its invoice and its timeline, and every payment reaches billing.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import Sum
from django.utils import timezone

from billing.exceptions import BillingError, PaymentNotFound
from billing.numbering import save_with_number
from billing.pdf import format_amount, payment_method_label
from billing.sync import (
    create_invoice_from_custom_order,
    delete_payment_and_sync,
    staff_display_name,
    sync_payment_to_invoice,
)
from monitoring.html_logger import info, warn

from .exceptions import InvalidPaymentAmount, InvalidPaymentMethod
from .models import (
    CustomOrder,
    CustomOrderItem,
    CustomOrderPayment,
    CustomOrderTimeline,
    PaymentMethod,
)

logger = logging.getLogger(__name__)


def _to_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidPaymentAmount(f"Montant invalide: {value!r}") from exc
    if not amount.is_finite() or amount <= 0:
        raise InvalidPaymentAmount("Le montant doit être supérieur à zéro")
    return amount


def add_timeline_entry(order, event: str, description: str = "", user=None) -> CustomOrderTimeline:
    """
    Append an event to the history of an order.

    Parameters
    ----------
    order : CustomOrder
        The order concerned.
    event : str
        Short title, e.g. ``"Paiement reçu: Avance"``.
    description : str, optional
        Details shown under the title.
    user : User, optional
        Staff member at the origin of the event.

    Returns
    -------
    CustomOrderTimeline
        The created entry.
    """
    return CustomOrderTimeline.objects.create(
        order=order,
        event=event,
        description=description,
        user=user,
        user_name=staff_display_name(user) or "",
    )


def amount_due(order) -> Decimal:
    """Items plus material cost, i.e. the invoice total of the order."""
    return order.total_cost + order.material_cost


def payment_summary(order) -> dict:
    """
    Summarize what was paid on an order.

    Parameters
    ----------
    order : CustomOrder
        The order to summarize.

    Returns
    -------
    dict
        ``total_cost`` (items and material), ``total_paid``,
        ``balance`` and ``is_paid_in_full``.
    """
    total_paid = order.payments.aggregate(total=Sum("amount"))["total"] or Decimal("0")
    total_cost = amount_due(order)
    balance = total_cost - total_paid
    return {
        "total_cost": total_cost,
        "total_paid": total_paid,
        "balance": balance,
        "is_paid_in_full": balance <= 0,
    }


def create_custom_order(
    customer,
    items,
    pickup_date,
    material_cost=0,
    deposit=0,
    notes: str = "",
    actor=None,
    deposit_method: str | None = None,
) -> CustomOrder:
    """
    Register a new custom order.

    The order is numbered ``SM-DDMMYY-NNNN``, its invoice is created
    right away and, when a deposit is given, the deposit is recorded
    and synchronized with billing.

    Parameters
    ----------
    customer : Customer
        Customer placing the order.
    items : iterable of dict
        Garments, each with ``garment_type``, ``unit_price`` and
        optionally ``custom_type``, ``description``, ``quantity``.
    pickup_date : date
        Date promised to the customer.
    material_cost : Decimal, optional
        Fabric and accessories billed on top of the items.
    deposit : Decimal, optional
        Amount paid when ordering.
    notes : str, optional
        Free notes.
    actor : User, optional
        Staff member registering the order.
    deposit_method : str, optional
        Payment method of the deposit.

    Returns
    -------
    CustomOrder
        The saved order.
    """
    lines = [
        CustomOrderItem(
            garment_type=item["garment_type"],
            custom_type=item.get("custom_type") or "",
            description=item.get("description") or "",
            quantity=int(item.get("quantity") or 1),
            unit_price=Decimal(str(item.get("unit_price") or 0)),
        )
        for item in items
    ]
    deposit = Decimal(str(deposit or 0))

    with transaction.atomic():
        order = CustomOrder(
            customer=customer,
            pickup_date=pickup_date,
            material_cost=Decimal(str(material_cost or 0)),
            total_cost=sum((line.line_total for line in lines), Decimal("0")),
            notes=notes,
            created_by=actor,
        )
        save_with_number(order, "order_number", settings.CUSTOM_ORDER_TAG)
        for line in lines:
            line.order = order
        CustomOrderItem.objects.bulk_create(lines)

        add_timeline_entry(
            order,
            "Commande créée",
            f"{len(lines)} article(s), total {format_amount(amount_due(order))}",
            user=actor,
        )
        create_invoice_from_custom_order(order.pk, actor=actor)

    info(f"Commande {order.order_number} créée pour {customer}.")

    if deposit > 0:
        receive_payment(
            order,
            deposit,
            payment_method=deposit_method,
            payment_type=CustomOrderPayment.PaymentType.DEPOSIT,
            actor=actor,
        )
    return order


def record_payment(
    order,
    amount,
    payment_method: str | None = None,
    payment_type: str = CustomOrderPayment.PaymentType.INSTALLMENT,
    notes: str = "",
    paid_at=None,
    actor=None,
) -> CustomOrderPayment:
    """
    Record money received against an order.

    Parameters
    ----------
    order : CustomOrder
        The order being paid.
    amount : Decimal or str
        Amount received, strictly positive.
    payment_method : str, optional
        One of :class:`PaymentMethod`, or None when unknown.
    payment_type : str, optional
        Deposit, installment or final. Turned into final when the
        payment settles the order.
    notes : str, optional
        Free notes.
    paid_at : datetime, optional
        When the money was received. Defaults to now.
    actor : User, optional
        Staff member who received the money.

    Returns
    -------
    CustomOrderPayment
        The saved payment. It is not synchronized with billing yet.

    Raises
    ------
    InvalidPaymentAmount
        If the amount is not strictly positive.
    InvalidPaymentMethod
        If the method is not an accepted payment method.
    """
    amount = _to_amount(amount)
    if payment_method and payment_method not in PaymentMethod.values:
        raise InvalidPaymentMethod(f"Mode de paiement inconnu: {payment_method}")

    already_paid = order.payments.aggregate(total=Sum("amount"))["total"] or Decimal("0")
    if amount_due(order) - (already_paid + amount) <= 0:
        payment_type = CustomOrderPayment.PaymentType.FINAL

    return CustomOrderPayment.objects.create(
        order=order,
        amount=amount,
        payment_type=payment_type,
        payment_method=payment_method or None,
        notes=notes,
        paid_at=paid_at or timezone.now(),
        received_by=actor,
    )


def receive_payment(
    order,
    amount,
    payment_method: str | None = None,
    payment_type: str = CustomOrderPayment.PaymentType.INSTALLMENT,
    notes: str = "",
    actor=None,
):
    """
    Record a payment, synchronize it with billing and log it.

    A failed synchronization does not undo the payment: the money
    was received. The incident is written to the journal and the
    payment can be synchronized again later.

    Returns
    -------
    tuple
        ``(payment, receipt, summary)`` where ``receipt`` is None if
        the synchronization failed.
    """
    payment = record_payment(
        order,
        amount,
        payment_method=payment_method,
        payment_type=payment_type,
        notes=notes,
        actor=actor,
    )

    receipt = None
    try:
        result = sync_payment_to_invoice(payment.pk, order.pk, actor=actor)
        receipt = result.receipt
    except (BillingError, DatabaseError) as ex:
        logger.exception("Payment %s could not be synchronized", payment.pk)
        warn(f"Synchronisation facture impossible pour le paiement {payment.pk} ({order.order_number}): {ex}")

    summary = payment_summary(order)
    description = f"{format_amount(payment.amount)} reçu"
    if payment.payment_method:
        description += f" via {payment_method_label(payment.payment_method)}"
    description += ". "
    if summary["is_paid_in_full"]:
        description += "Commande entièrement payée!"
    else:
        description += f"Reste: {format_amount(summary['balance'])}"
    if receipt is not None:
        description += f" - Reçu {receipt.receipt_number}"

    add_timeline_entry(
        order,
        f"Paiement reçu: {payment.get_payment_type_display()}",
        description,
        user=actor,
    )
    return payment, receipt, summary


def remove_payment(order, payment_id, actor=None) -> dict:
    """
    Delete a payment of an order and log it.

    Parameters
    ----------
    order : CustomOrder
        The order the payment belongs to.
    payment_id : int
        Primary key of the payment.
    actor : User, optional
        Staff member deleting the payment.

    Returns
    -------
    dict
        The payment summary after deletion.

    Raises
    ------
    PaymentNotFound
        If the payment does not exist on that order.
    """
    payment = order.payments.filter(pk=payment_id).first()
    if payment is None:
        raise PaymentNotFound()

    amount = payment.amount
    delete_payment_and_sync(payment.pk)
    add_timeline_entry(
        order,
        "Paiement supprimé",
        f"Paiement de {format_amount(amount)} annulé",
        user=actor,
    )
    return payment_summary(order)


def set_order_status(order, status: str, actor=None) -> CustomOrder:
    """
    Change the production status of an order.

    A timeline entry is recorded only when the status actually
    changes.

    Raises
    ------
    ValueError
        If ``status`` is not a :class:`CustomOrder.Status` value.
    """
    if status not in CustomOrder.Status.values:
        raise ValueError(f"Unknown custom order status: {status}")
    if order.status == status:
        return order

    previous = order.get_status_display()
    order.status = status
    order.save(update_fields=["status"])
    add_timeline_entry(
        order,
        "Statut changé",
        f"{previous} → {order.get_status_display()}",
        user=actor,
    )
    return order
