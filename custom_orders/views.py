# custom_orders/views.py
"""
Views for the custom orders application.

This module exposes the payments of a custom order to staff as
JSON endpoints: list and record payments, and delete a payment
together with the billing rows derived from it.
"""

from django.contrib.admin.views.decorators import staff_member_required
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods, require_POST

from billing.exceptions import PaymentNotFound
from monitoring.html_logger import info, warn

from .exceptions import CustomOrderError
from .forms import PaymentForm
from .models import CustomOrder
from .services import payment_summary, receive_payment, remove_payment


def _summary_json(summary: dict) -> dict:
    return {key: float(value) if not isinstance(value, bool) else value for key, value in summary.items()}


def _payment_json(payment) -> dict:
    """
    Serialize a payment with its receipt number, if any.

    Parameters
    ----------
    payment : CustomOrderPayment
        The payment to serialize.

    Returns
    -------
    dict
        JSON-ready representation.
    """
    receipt = getattr(payment, "receipt", None)
    return {
        "id": payment.pk,
        "amount": float(payment.amount),
        "payment_type": payment.payment_type,
        "payment_method": payment.payment_method,
        "notes": payment.notes,
        "paid_at": payment.paid_at.isoformat(),
        "received_by": payment.received_by.get_username() if payment.received_by else None,
        "receipt_id": receipt.pk if receipt else None,
        "receipt_number": receipt.receipt_number if receipt else None,
    }


@staff_member_required
@require_http_methods(["GET", "POST"])
def order_payments(request, pk):
    """
    List or record the payments of a custom order.

    ``GET`` returns the payments and the payment summary. ``POST``
    records a payment from form data and synchronizes it with
    billing. When synchronization fails the payment is kept and
    ``receipt`` is null.

    Parameters
    ----------
    request : HttpRequest
        The current HTTP request.
    pk : int
        Primary key of the custom order.

    Returns
    -------
    JsonResponse
        200 with the payments (GET), 201 with the recorded payment
        (POST), or 400 with the validation errors.
    """
    order = get_object_or_404(CustomOrder, pk=pk)

    if request.method == "GET":
        payments = order.payments.select_related("received_by", "receipt")
        return JsonResponse(
            {
                "payments": [_payment_json(p) for p in payments],
                "summary": _summary_json(payment_summary(order)),
            }
        )

    form = PaymentForm(request.POST)
    if not form.is_valid():
        warn(f"Payment form invalid (order={order.order_number}, user={request.user.id}).")
        return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

    try:
        payment, receipt, summary = receive_payment(
            order,
            form.cleaned_data["amount"],
            payment_method=form.cleaned_data["payment_method"],
            payment_type=form.cleaned_data["payment_type"],
            notes=form.cleaned_data["notes"],
            actor=request.user,
        )
    except CustomOrderError as ex:
        warn(f"Payment rejected (order={order.order_number}): {ex}")
        return JsonResponse({"error": str(ex)}, status=400)

    info(f"Paiement {payment.pk} enregistré sur {order.order_number} par user={request.user.id}.")
    return JsonResponse(
        {
            "payment": _payment_json(payment),
            "receipt": (
                {"id": receipt.pk, "receipt_number": receipt.receipt_number}
                if receipt is not None
                else None
            ),
            "summary": _summary_json(summary),
            "message": (
                "Paiement complet!"
                if summary["is_paid_in_full"]
                else "Paiement enregistré."
            ),
        },
        status=201,
    )


@staff_member_required
@require_POST
def delete_payment(request, pk, payment_id):
    """
    Delete a payment of a custom order.

    The receipt and the invoice payment derived from it are
    deleted too, and the invoice is reconciled.

    Parameters
    ----------
    request : HttpRequest
        The current HTTP request.
    pk : int
        Primary key of the custom order.
    payment_id : int
        Primary key of the payment.

    Returns
    -------
    JsonResponse
        The payment summary after deletion.

    Raises
    ------
    Http404
        If the order does not exist or the payment is not on it.
    """
    order = get_object_or_404(CustomOrder, pk=pk)
    try:
        summary = remove_payment(order, payment_id, actor=request.user)
    except PaymentNotFound as ex:
        raise Http404(str(ex)) from ex

    info(f"Paiement {payment_id} supprimé sur {order.order_number} par user={request.user.id}.")
    return JsonResponse({"success": True, "summary": _summary_json(summary)})
