# custom_orders/forms.py
"""
Forms for the custom orders application.

This module validates the payment data posted by staff before
anything is recorded.
"""

from decimal import Decimal

from django import forms

from .models import CustomOrderPayment, PaymentMethod


class PaymentForm(forms.Form):
    """
    Form for recording a payment on a custom order.

    Attributes
    ----------
    amount : forms.DecimalField
        Amount received, strictly positive.
    payment_method : forms.ChoiceField
        One of :class:`PaymentMethod`. Optional, cash is assumed
        downstream when left empty.
    payment_type : forms.ChoiceField
        Deposit, installment or final. Defaults to installment.
    notes : forms.CharField
        Free notes.
    """

    amount = forms.DecimalField(label="Montant", max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    payment_method = forms.ChoiceField(
        label="Mode de paiement",
        choices=[("", "---------")] + list(PaymentMethod.choices),
        required=False,
    )
    payment_type = forms.ChoiceField(
        label="Type",
        choices=CustomOrderPayment.PaymentType.choices,
        required=False,
    )
    notes = forms.CharField(label="Notes", required=False, widget=forms.Textarea)

    def clean_payment_type(self):
        return self.cleaned_data.get("payment_type") or CustomOrderPayment.PaymentType.INSTALLMENT

    def clean_payment_method(self):
        return self.cleaned_data.get("payment_method") or None
