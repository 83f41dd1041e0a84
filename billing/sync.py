# billing/sync.py
"""
Reconciliation between custom orders and billing.

A custom order is billed through exactly one invoice. Every payment
staff record on the order is mirrored as an invoice payment, proved
by a receipt, and the invoice totals and status are recomputed from
the payments it holds.

The public entry points are:

- :func:`create_invoice_from_custom_order`
- :func:`sync_payment_to_invoice`
- :func:`update_invoice_amount_and_status`
- :func:`emit_receipt`
- :func:`delete_payment_and_sync`

Synchronization and deletion each run in a single transaction: either
the whole chain of rows is written, or nothing is.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Sum
from django.utils import timezone

from custom_orders.models import CustomOrder, CustomOrderPayment
from monitoring.html_logger import info

from .exceptions import CustomOrderNotFound, PaymentNotFound
from .models import Invoice, InvoiceItem, InvoicePayment, Receipt
from .numbering import save_with_number

logger = logging.getLogger(__name__)

MATERIAL_COST_LABEL = "Coût matériel (tissu, accessoires)"

#: Source payment method -> invoice payment method.
PAYMENT_METHOD_MAP = {
    "CASH": InvoicePayment.Method.CASH,
    "WAVE": InvoicePayment.Method.WAVE,
    "ORANGE_MONEY": InvoicePayment.Method.ORANGE_MONEY,
    "MTN_MOBILE_MONEY": InvoicePayment.Method.MTN_MOBILE_MONEY,
    "BANK_TRANSFER": InvoicePayment.Method.BANK_TRANSFER,
    "CHECK": InvoicePayment.Method.CHECK,
    "CARD": InvoicePayment.Method.PAIEMENTPRO,
    "OTHER": InvoicePayment.Method.OTHER,
}


@dataclass(frozen=True)
class SyncResult:
    """
    Rows written (or found) by a payment synchronization.

    Attributes
    ----------
    invoice : Invoice
        Invoice of the order, as reconciled after the payment.
    invoice_payment : InvoicePayment
        Invoice-level mirror of the order payment.
    receipt : Receipt
        Proof of payment.
    """

    invoice: Invoice
    invoice_payment: InvoicePayment
    receipt: Receipt

    @property
    def invoice_payment_id(self) -> int:
        return self.invoice_payment.pk

    @property
    def receipt_id(self) -> int:
        return self.receipt.pk


def map_payment_method(source: str | None) -> str:
    """
    Map a source payment method onto the invoice payment methods.

    Parameters
    ----------
    source : str or None
        Method stored on the custom order payment.

    Returns
    -------
    str
        A member of :class:`InvoicePayment.Method`. Card payments go
        through PaiementPro. Missing or unknown values map to cash.
    """
    return PAYMENT_METHOD_MAP.get(source or "", InvoicePayment.Method.CASH)


def payment_reference(payment_id) -> str:
    """Short reference ``CP-<last 8 digits of the payment id>``."""
    return f"CP-{str(payment_id).zfill(8)[-8:]}"


def staff_display_name(user) -> str | None:
    """Full name of a staff member, falling back to the username."""
    if user is None:
        return None
    return user.get_full_name() or user.get_username()


def invoice_status_for(amount_paid: Decimal, total: Decimal) -> str:
    """
    Status an invoice must have for the given amounts.

    Parameters
    ----------
    amount_paid : Decimal
        Sum of the invoice payments.
    total : Decimal
        Invoice total.

    Returns
    -------
    str
        ``SENT`` when nothing is paid, ``PAID`` when the payments
        cover the total, ``PARTIAL`` in between.
    """
    if amount_paid <= 0:
        return Invoice.Status.SENT
    if amount_paid >= total:
        return Invoice.Status.PAID
    return Invoice.Status.PARTIAL


def _item_description(item) -> str:
    if item.description:
        return f"{item.label}: {item.description}"
    return item.label


def create_invoice_from_custom_order(custom_order_id, actor=None) -> Invoice:
    """
    Materialize the invoice of a custom order.

    Calling it again for the same order returns the invoice already
    linked to it, unchanged.

    Parameters
    ----------
    custom_order_id : int
        Primary key of the custom order.
    actor : User, optional
        Staff member at the origin of the invoice. Defaults to the
        creator of the order.

    Returns
    -------
    Invoice
        The invoice linked to the order.

    Raises
    ------
    CustomOrderNotFound
        If the order does not exist.
    """
    try:
        order = CustomOrder.objects.select_related("customer").get(pk=custom_order_id)
    except CustomOrder.DoesNotExist as exc:
        raise CustomOrderNotFound() from exc

    existing = Invoice.objects.filter(custom_order=order).first()
    if existing is not None:
        return existing

    items = list(order.items.all())
    subtotal = sum((item.unit_price * item.quantity for item in items), Decimal("0"))
    customer = order.customer

    invoice = Invoice(
        custom_order=order,
        customer_name=customer.name or "Client",
        customer_email=customer.email or None,
        customer_phone=customer.phone or None,
        customer_address=customer.address_line or None,
        status=Invoice.Status.SENT,
        issue_date=order.order_date,
        due_date=order.pickup_date,
        subtotal=subtotal,
        total=subtotal + order.material_cost,
        amount_paid=Decimal("0"),
        notes=f"Commande sur-mesure N° {order.order_number}",
        created_by=actor or order.created_by,
    )

    lines = [
        InvoiceItem(
            description=_item_description(item),
            quantity=item.quantity,
            unit_price=item.unit_price,
            total=item.unit_price * item.quantity,
        )
        for item in items
    ]
    if order.material_cost > 0:
        lines.append(
            InvoiceItem(
                description=MATERIAL_COST_LABEL,
                quantity=1,
                unit_price=order.material_cost,
                total=order.material_cost,
            )
        )

    try:
        with transaction.atomic():
            save_with_number(invoice, "invoice_number", settings.BILLING_INVOICE_TAG)
            for position, line in enumerate(lines):
                line.invoice = invoice
                line.position = position
            InvoiceItem.objects.bulk_create(lines)
    except IntegrityError:
        # Another request invoiced the same order first.
        winner = Invoice.objects.filter(custom_order_id=order.pk).first()
        if winner is None:
            raise
        logger.info("Invoice for order %s created concurrently, reusing it", order.order_number)
        return winner

    info(
        f"Facture {invoice.invoice_number} créée pour la commande "
        f"{order.order_number} (total={invoice.total})."
    )
    return invoice


def update_invoice_amount_and_status(invoice_id) -> None:
    """
    Recompute ``amount_paid``, ``status`` and ``paid_date`` of an invoice.

    The amounts are always recomputed from the payment rows, never
    incremented, so calling this redundantly is harmless. The invoice
    row is locked while recomputing. A missing invoice is ignored.

    Parameters
    ----------
    invoice_id : int
        Primary key of the invoice.
    """
    with transaction.atomic():
        invoice = Invoice.objects.select_for_update().filter(pk=invoice_id).first()
        if invoice is None:
            return

        amount_paid = invoice.payments.aggregate(total=Sum("amount"))["total"] or Decimal("0")
        status = invoice_status_for(amount_paid, invoice.total)

        invoice.amount_paid = amount_paid
        invoice.status = status
        invoice.paid_date = timezone.now() if status == Invoice.Status.PAID else None
        invoice.save(update_fields=["amount_paid", "status", "paid_date"])

    logger.debug("Invoice %s reconciled: paid=%s status=%s", invoice_id, amount_paid, status)


def emit_receipt(payment, invoice, invoice_payment, actor=None) -> Receipt:
    """
    Issue the receipt proving a synchronized payment.

    Parameters
    ----------
    payment : CustomOrderPayment
        The order payment being proved.
    invoice : Invoice
        Invoice the payment was applied to.
    invoice_payment : InvoicePayment
        Invoice-level mirror of ``payment``.
    actor : User, optional
        Staff member triggering the synchronization.

    Returns
    -------
    Receipt
        The saved receipt, numbered ``REC-DDMMYY-NNNN``.
    """
    order = payment.order
    customer = order.customer
    receipt = Receipt(
        custom_order_payment=payment,
        invoice_payment=invoice_payment,
        invoice=invoice,
        custom_order=order,
        customer_name=customer.name or "Client",
        customer_phone=customer.phone or None,
        customer_email=customer.email or None,
        amount=payment.amount,
        payment_method=payment.payment_method or "CASH",
        payment_date=payment.paid_at,
        created_by=actor,
        created_by_name=staff_display_name(payment.received_by),
    )
    return save_with_number(receipt, "receipt_number", settings.BILLING_RECEIPT_TAG)


def sync_payment_to_invoice(custom_order_payment_id, custom_order_id, actor=None) -> SyncResult:
    """
    Mirror a custom order payment into billing.

    Ensures the order has an invoice, records the invoice payment,
    links it back to the order payment, issues the receipt and
    reconciles the invoice. A payment already synchronized is not
    mirrored twice: its existing rows are returned.

    Parameters
    ----------
    custom_order_payment_id : int
        Primary key of the order payment.
    custom_order_id : int
        Primary key of the order the payment must belong to.
    actor : User, optional
        Staff member triggering the synchronization.

    Returns
    -------
    SyncResult
        The invoice, invoice payment and receipt.

    Raises
    ------
    PaymentNotFound
        If the payment does not exist on that order.
    CustomOrderNotFound
        If the order disappeared meanwhile.
    NumberAllocationError
        If no invoice or receipt number could be allocated.
    """
    with transaction.atomic():
        payment = (
            CustomOrderPayment.objects.select_for_update()
            .filter(pk=custom_order_payment_id, order_id=custom_order_id)
            .first()
        )
        if payment is None:
            raise PaymentNotFound()

        if payment.invoice_payment_id is not None:
            invoice_payment = payment.invoice_payment
            invoice = invoice_payment.invoice
            receipt = Receipt.objects.filter(custom_order_payment=payment).first()
            if receipt is None:
                receipt = emit_receipt(payment, invoice, invoice_payment, actor=actor)
            return SyncResult(invoice, invoice_payment, receipt)

        invoice = create_invoice_from_custom_order(custom_order_id, actor=actor)

        invoice_payment = InvoicePayment.objects.create(
            invoice=invoice,
            amount=payment.amount,
            payment_method=map_payment_method(payment.payment_method),
            reference=payment_reference(payment.pk),
            paid_at=payment.paid_at,
            notes=payment.notes,
            created_by=actor,
        )
        payment.invoice_payment = invoice_payment
        payment.save(update_fields=["invoice_payment"])

        receipt = emit_receipt(payment, invoice, invoice_payment, actor=actor)

        update_invoice_amount_and_status(invoice.pk)
        invoice.refresh_from_db()

    info(
        f"Paiement {payment.pk} synchronisé: facture {invoice.invoice_number} "
        f"({invoice.get_status_display()}), reçu {receipt.receipt_number}."
    )
    return SyncResult(invoice, invoice_payment, receipt)


def delete_payment_and_sync(custom_order_payment_id) -> None:
    """
    Delete an order payment and everything derived from it.

    Removes the receipt, then the invoice payment, then the order
    payment itself, and reconciles the invoice of the order. Deleting
    a payment that no longer exists does nothing.

    Parameters
    ----------
    custom_order_payment_id : int
        Primary key of the order payment.
    """
    with transaction.atomic():
        payment = (
            CustomOrderPayment.objects.select_for_update()
            .filter(pk=custom_order_payment_id)
            .first()
        )
        if payment is None:
            logger.info("Payment %s already deleted", custom_order_payment_id)
            return

        order_id = payment.order_id
        Receipt.objects.filter(custom_order_payment=payment).delete()

        if payment.invoice_payment_id is not None:
            Receipt.objects.filter(invoice_payment_id=payment.invoice_payment_id).delete()
            InvoicePayment.objects.filter(pk=payment.invoice_payment_id).delete()

        amount = payment.amount
        payment.delete()

        invoice = Invoice.objects.filter(custom_order_id=order_id).first()
        if invoice is not None:
            update_invoice_amount_and_status(invoice.pk)

    info(f"Paiement {custom_order_payment_id} supprimé (montant={amount}, commande={order_id}).")
