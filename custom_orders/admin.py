# custom_orders/admin.py
"""
Admin configuration for the custom orders application.

This module defines Django admin customizations for
:class:`CustomOrder`, with its items, payments and timeline
displayed inline.
"""

from django.contrib import admin
from .models import CustomOrder, CustomOrderItem, CustomOrderPayment, CustomOrderTimeline
from .services import set_order_status


class CustomOrderItemInline(admin.TabularInline):
    """
    Items of an order, read-only: they are billed on the invoice.
    """

    model = CustomOrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("garment_type", "custom_type", "description", "quantity", "unit_price")

    def has_add_permission(self, request, obj=None):
        return False


class CustomOrderPaymentInline(admin.TabularInline):
    """
    Payments of an order.

    Read-only: payments must go through the payment endpoints so
    that billing stays in sync.
    """

    model = CustomOrderPayment
    fk_name = "order"
    extra = 0
    can_delete = False
    readonly_fields = ("amount", "payment_type", "payment_method", "paid_at", "received_by", "invoice_payment")

    def has_add_permission(self, request, obj=None):
        return False


class CustomOrderTimelineInline(admin.TabularInline):
    model = CustomOrderTimeline
    extra = 0
    can_delete = False
    readonly_fields = ("event", "description", "user_name", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(CustomOrder)
class CustomOrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the CustomOrder model.

    Provides list display, filters, and search options for
    custom orders in the Django admin interface.
    """
    # Fields displayed in the admin list view
    list_display = ("order_number", "customer", "status", "total_cost", "material_cost", "pickup_date")
    # Filters available in the right sidebar
    list_filter = ("status",)
    # Fields available for the admin search bar
    search_fields = ("order_number", "customer__name", "customer__phone")
    readonly_fields = ("order_number", "customer", "order_date", "total_cost", "material_cost", "created_by")
    inlines = [CustomOrderItemInline, CustomOrderPaymentInline, CustomOrderTimelineInline]

    def has_add_permission(self, request):
        # orders are created through create_custom_order only
        return False

    def save_model(self, request, obj, form, change):
        """
        Save the order, recording status changes in its timeline.
        """
        if change and "status" in form.changed_data:
            status = obj.status
            obj.status = form.initial["status"]
            super().save_model(request, obj, form, change)
            set_order_status(obj, status, actor=request.user)
        else:
            super().save_model(request, obj, form, change)
