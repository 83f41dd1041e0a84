# custom_orders/urls.py
"""
URL configuration for the custom orders application.

This module defines the staff endpoints used to list, record
and delete the payments of a custom order.
"""

from django.urls import path
from .views import order_payments, delete_payment

# Application namespace used for reverse lookups
app_name = "custom_orders"

#: URL patterns for the custom orders application
urlpatterns = [
    # List (GET) or record (POST) the payments of an order
    path("<int:pk>/paiements/", order_payments, name="payments"),

    # Delete one payment and everything billing derived from it
    path("<int:pk>/paiements/<int:payment_id>/supprimer/", delete_payment, name="delete_payment"),
]
