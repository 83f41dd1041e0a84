# billing/pdf.py
"""
PDF generation utilities for the billing application.

This module renders invoices (A4) and receipts (A5) with
ReportLab. Renderers only read rows: amounts, statuses and
customer details come from what billing already stored, so a
document printed twice shows the same figures.

``target`` may be a file system path or a binary file-like
object such as :class:`io.BytesIO`.
"""

from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone
from reportlab.lib.pagesizes import A4, A5
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .exceptions import PDFGenerationError

#: Labels for both the order-side and the invoice-side payment methods.
PAYMENT_METHOD_LABELS = {
    "CASH": "Espèces",
    "BANK_TRANSFER": "Virement bancaire",
    "CHECK": "Chèque",
    "ORANGE_MONEY": "Orange Money",
    "MTN_MOBILE_MONEY": "MTN MoMo",
    "MOOV_MONEY": "Moov Money",
    "WAVE": "Wave",
    "PAIEMENTPRO": "PaiementPro",
    "CARD": "Carte bancaire",
    "PAYPAL": "PayPal",
    "OTHER": "Autre",
}


def format_amount(amount) -> str:
    """
    Format an amount the way it is printed on documents.

    Parameters
    ----------
    amount : Decimal, int or float
        Amount to format. Rounded to the unit.

    Returns
    -------
    str
        E.g. ``"23 000 FCFA"``.
    """
    currency = getattr(settings, "BILLING_CURRENCY", "FCFA")
    units = int(Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return f"{units:,}".replace(",", " ") + f" {currency}"


def format_datetime(value) -> str:
    """
    Format a date/time as ``"19/10/2026 à 14:05"`` in local time.
    """
    if value is None:
        return ""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime("%d/%m/%Y à %H:%M")


def format_date(value) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def payment_method_label(method: str | None) -> str:
    """
    Human readable label of a payment method.

    Missing methods are cash. Unknown codes are printed as is.
    """
    if not method:
        return PAYMENT_METHOD_LABELS["CASH"]
    return PAYMENT_METHOD_LABELS.get(method, method)


def _draw_header(c, margin, y, title):
    c.setFont("Helvetica-Bold", 14)
    c.drawString(margin, y, settings.ATELIER_NAME)
    y -= 5 * mm
    c.setFont("Helvetica", 8)
    for line in (settings.ATELIER_ADDRESS, settings.ATELIER_PHONE, settings.ATELIER_WEBSITE):
        if line:
            c.drawString(margin, y, line)
            y -= 4 * mm
    y -= 4 * mm
    c.setFont("Helvetica-Bold", 13)
    c.drawString(margin, y, title)
    return y - 8 * mm


def generate_invoice_pdf(invoice, target):
    """
    Render an invoice as an A4 PDF.

    Parameters
    ----------
    invoice : Invoice
        The invoice to render.
    target : str or file-like
        Where to write the PDF.

    Raises
    ------
    PDFGenerationError
        If ReportLab or the file system fails.

    Notes
    -----
    The layout has a header with the atelier identity, the invoice
    number and dates, the customer snapshot, the items table, then
    the totals, the amount already paid, the balance and the status.
    """
    try:
        c = canvas.Canvas(target, pagesize=A4)
        c.setTitle(f"Facture {invoice.invoice_number}")
        width, height = A4
        margin = 20 * mm
        right = width - margin
        y = _draw_header(c, margin, height - margin, f"FACTURE N° {invoice.invoice_number}")

        # --- Dates and status ---
        c.setFont("Helvetica", 10)
        c.drawString(margin, y, f"Date d'émission: {format_datetime(invoice.issue_date)}")
        y -= 5 * mm
        if invoice.due_date:
            c.drawString(margin, y, f"Échéance: {format_date(invoice.due_date)}")
            y -= 5 * mm
        c.drawString(margin, y, f"Statut: {invoice.get_status_display()}")
        y -= 10 * mm

        # --- Customer snapshot ---
        c.setFont("Helvetica-Bold", 10)
        c.drawString(margin, y, "Facturé à:")
        y -= 5 * mm
        c.setFont("Helvetica", 10)
        for line in (
            invoice.customer_name,
            invoice.customer_phone,
            invoice.customer_email,
            invoice.customer_address,
        ):
            if line:
                c.drawString(margin, y, line)
                y -= 5 * mm
        y -= 6 * mm

        # --- Items table ---
        c.setFont("Helvetica-Bold", 10)
        c.drawString(margin, y, "Désignation")
        c.drawRightString(right - 75 * mm, y, "Qté")
        c.drawRightString(right - 40 * mm, y, "Prix unitaire")
        c.drawRightString(right, y, "Total")
        y -= 2 * mm
        c.line(margin, y, right, y)
        y -= 5 * mm
        c.setFont("Helvetica", 10)
        for item in invoice.items.all():
            if y < 50 * mm:
                c.showPage()
                c.setFont("Helvetica", 10)
                y = height - margin
            c.drawString(margin, y, item.description[:60])
            c.drawRightString(right - 75 * mm, y, str(item.quantity))
            c.drawRightString(right - 40 * mm, y, format_amount(item.unit_price))
            c.drawRightString(right, y, format_amount(item.total))
            y -= 6 * mm
        c.line(margin, y + 2 * mm, right, y + 2 * mm)
        y -= 4 * mm

        # --- Totals ---
        rows = [("Sous-total", invoice.subtotal)]
        if invoice.tax:
            rows.append(("Taxes", invoice.tax))
        if invoice.shipping_cost:
            rows.append(("Livraison", invoice.shipping_cost))
        if invoice.discount:
            rows.append(("Remise", -invoice.discount))
        for label, amount in rows:
            c.drawRightString(right - 40 * mm, y, f"{label}:")
            c.drawRightString(right, y, format_amount(amount))
            y -= 5 * mm
        c.setFont("Helvetica-Bold", 11)
        c.drawRightString(right - 40 * mm, y, "Total:")
        c.drawRightString(right, y, format_amount(invoice.total))
        y -= 7 * mm
        c.setFont("Helvetica", 10)
        c.drawRightString(right - 40 * mm, y, "Montant payé:")
        c.drawRightString(right, y, format_amount(invoice.amount_paid))
        y -= 5 * mm
        c.setFont("Helvetica-Bold", 10)
        c.drawRightString(right - 40 * mm, y, "Reste à payer:")
        c.drawRightString(right, y, format_amount(invoice.balance))
        y -= 10 * mm

        if invoice.notes:
            c.setFont("Helvetica-Oblique", 9)
            c.drawString(margin, y, invoice.notes[:100])

        # --- Footer ---
        c.setFont("Helvetica-Oblique", 9)
        c.drawString(margin, 15 * mm, "Merci pour votre confiance !")
        c.showPage()
        c.save()
    except Exception as exc:
        raise PDFGenerationError(
            f"Échec de génération de la facture {invoice.invoice_number}"
        ) from exc


def _receipt_lines(receipt):
    """Items printed on a receipt: the order items, else the invoice items."""
    order = receipt.custom_order
    if order is not None:
        lines = [
            (item.label, item.quantity, item.line_total)
            for item in order.items.all()
        ]
        if order.material_cost > 0:
            lines.append(("Coût matériel", 1, order.material_cost))
        return lines
    if receipt.invoice is not None:
        return [(item.description, item.quantity, item.total) for item in receipt.invoice.items.all()]
    return []


def _receipt_totals(receipt):
    """
    Order total and balance left right after the receipt's payment.

    Returns ``(None, None)`` when the receipt has no invoice.
    """
    invoice = receipt.invoice
    if invoice is None:
        return None, None
    paid = invoice.payments.filter(paid_at__lte=receipt.payment_date).aggregate(
        total=Sum("amount")
    )["total"] or Decimal("0")
    return invoice.total, invoice.total - paid


def generate_receipt_pdf(receipt, target):
    """
    Render a receipt as an A5 PDF.

    Parameters
    ----------
    receipt : Receipt
        The receipt to render.
    target : str or file-like
        Where to write the PDF.

    Raises
    ------
    PDFGenerationError
        If ReportLab or the file system fails.
    """
    try:
        c = canvas.Canvas(target, pagesize=A5)
        c.setTitle(f"Reçu {receipt.receipt_number}")
        width, height = A5
        margin = 12 * mm
        right = width - margin
        y = _draw_header(c, margin, height - margin, "REÇU DE PAIEMENT")

        c.setFont("Helvetica", 9)
        c.drawString(margin, y, f"N° {receipt.receipt_number}")
        y -= 5 * mm
        c.drawString(margin, y, f"Client: {receipt.customer_name}")
        y -= 5 * mm
        if receipt.customer_phone:
            c.drawString(margin, y, f"Téléphone: {receipt.customer_phone}")
            y -= 5 * mm
        c.drawString(margin, y, f"Date: {format_datetime(receipt.payment_date)}")
        y -= 5 * mm
        c.drawString(margin, y, f"Mode de paiement: {payment_method_label(receipt.payment_method)}")
        y -= 5 * mm
        if receipt.custom_order is not None:
            c.drawString(margin, y, f"Commande: {receipt.custom_order.order_number}")
            y -= 5 * mm
        if receipt.invoice is not None:
            c.drawString(margin, y, f"Facture: {receipt.invoice.invoice_number}")
            y -= 5 * mm
        y -= 3 * mm

        # --- Items ---
        lines = _receipt_lines(receipt)
        if lines:
            c.setFont("Helvetica-Bold", 9)
            c.drawString(margin, y, "Article")
            c.drawRightString(right - 30 * mm, y, "Qté")
            c.drawRightString(right, y, "Montant")
            y -= 2 * mm
            c.line(margin, y, right, y)
            y -= 4 * mm
            c.setFont("Helvetica", 9)
            for label, quantity, amount in lines:
                c.drawString(margin, y, label[:40])
                c.drawRightString(right - 30 * mm, y, str(quantity))
                c.drawRightString(right, y, format_amount(amount))
                y -= 5 * mm
            y -= 2 * mm

        total, balance = _receipt_totals(receipt)
        if total is not None and total != receipt.amount:
            c.setFont("Helvetica", 9)
            c.drawString(margin, y, "Total commande:")
            c.drawRightString(right, y, format_amount(total))
            y -= 5 * mm
            if balance > 0:
                c.setFillColorRGB(0.8, 0.2, 0.2)
                c.drawString(margin, y, "Solde restant:")
                c.drawRightString(right, y, format_amount(balance))
                c.setFillColorRGB(0, 0, 0)
                y -= 5 * mm
            y -= 3 * mm

        # --- Amount box ---
        box_height = 14 * mm
        c.rect(margin, y - box_height, right - margin, box_height)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(margin + 4 * mm, y - 9 * mm, "MONTANT PAYÉ")
        c.setFont("Helvetica-Bold", 13)
        c.drawRightString(right - 4 * mm, y - 9 * mm, format_amount(receipt.amount))
        y -= box_height + 8 * mm

        if receipt.created_by_name:
            c.setFont("Helvetica", 9)
            c.drawString(margin, y, f"Reçu par: {receipt.created_by_name}")

        # --- Footer ---
        c.setFont("Helvetica-Oblique", 9)
        c.drawCentredString(width / 2, 12 * mm, "Merci pour votre confiance !")
        c.showPage()
        c.save()
    except Exception as exc:
        raise PDFGenerationError(
            f"Échec de génération du reçu {receipt.receipt_number}"
        ) from exc
