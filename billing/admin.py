# billing/admin.py
"""
Admin configuration for the billing application.

This module customizes the Django admin interface for
invoices and receipts. Amounts and statuses are maintained by
the reconciliation services, so they are read-only here.
"""

from django.contrib import admin
from .models import Invoice, InvoiceItem, InvoicePayment, Receipt


class InvoiceItemInline(admin.TabularInline):
    """Invoice lines, shown read-only under their invoice."""

    model = InvoiceItem
    extra = 0
    can_delete = False
    readonly_fields = ("position", "description", "quantity", "unit_price", "total")


class InvoicePaymentInline(admin.TabularInline):
    model = InvoicePayment
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "payment_method", "reference", "paid_at", "notes", "created_by")


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Invoice model.

    Attributes
    ----------
    list_display : tuple
        Number, customer snapshot, amounts, status and dates.
    list_filter : tuple
        Filter by invoice status.
    search_fields : tuple
        Search by invoice number, customer name or phone, and
        order number.
    """

    list_display = (
        "invoice_number",
        "customer_name",
        "total",
        "amount_paid",
        "status",
        "issue_date",
        "paid_date",
    )
    list_filter = ("status",)
    search_fields = (
        "invoice_number",
        "customer_name",
        "customer_phone",
        "custom_order__order_number",
    )
    readonly_fields = ("invoice_number", "amount_paid", "status", "paid_date")
    inlines = [InvoiceItemInline, InvoicePaymentInline]


@admin.register(Receipt)
class ReceiptAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Receipt model.

    Receipts are immutable, so every field is read-only.
    """

    list_display = (
        "receipt_number",
        "customer_name",
        "amount",
        "payment_method",
        "payment_date",
        "created_by_name",
    )
    search_fields = ("receipt_number", "customer_name", "customer_phone")

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False
