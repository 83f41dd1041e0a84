# billing/views.py
"""
Views for the billing application.

This module serves invoice and receipt documents as PDF
downloads. Documents are rendered on demand from the stored
rows; nothing is written to disk.
"""

from io import BytesIO
import re

from django.contrib.admin.views.decorators import staff_member_required
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET

from .models import Invoice, Receipt
from .exceptions import PDFGenerationError
from .pdf import generate_invoice_pdf, generate_receipt_pdf
from monitoring.html_logger import info, error


def _pdf_response(buffer: BytesIO, number: str) -> HttpResponse:
    """
    Wrap a rendered PDF in a download response.

    Parameters
    ----------
    buffer : BytesIO
        The rendered document.
    number : str
        Document number, used for the file name.

    Returns
    -------
    HttpResponse
        ``application/pdf`` response sent as an attachment.
    """
    filename = re.sub(r"[^A-Za-z0-9-]", "_", number)
    response = HttpResponse(buffer.getvalue(), content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="{filename}.pdf"'
    return response


@staff_member_required
@require_GET
def invoice_pdf(request, pk):
    """
    Download an invoice as PDF.

    Parameters
    ----------
    request : HttpRequest
        The current HTTP request.
    pk : int
        Primary key of the invoice.

    Returns
    -------
    HttpResponse
        The PDF, or a JSON error with status 500 if rendering failed.
    """
    invoice = get_object_or_404(Invoice, pk=pk)
    buffer = BytesIO()
    try:
        generate_invoice_pdf(invoice, buffer)
    except PDFGenerationError as ex:
        error(f"PDF generation error invoice={invoice.invoice_number}: {ex.__cause__ or ex}")
        return JsonResponse({"error": str(ex)}, status=500)

    info(f"Facture {invoice.invoice_number} téléchargée par user={request.user.id}.")
    return _pdf_response(buffer, invoice.invoice_number)


@staff_member_required
@require_GET
def receipt_pdf(request, pk):
    """
    Download a receipt as PDF.

    Parameters
    ----------
    request : HttpRequest
        The current HTTP request.
    pk : int
        Primary key of the receipt.

    Returns
    -------
    HttpResponse
        The PDF, or a JSON error with status 500 if rendering failed.
    """
    receipt = get_object_or_404(
        Receipt.objects.select_related("invoice", "custom_order"), pk=pk
    )
    buffer = BytesIO()
    try:
        generate_receipt_pdf(receipt, buffer)
    except PDFGenerationError as ex:
        error(f"PDF generation error receipt={receipt.receipt_number}: {ex.__cause__ or ex}")
        return JsonResponse({"error": str(ex)}, status=500)

    info(f"Reçu {receipt.receipt_number} téléchargé par user={request.user.id}.")
    return _pdf_response(buffer, receipt.receipt_number)
