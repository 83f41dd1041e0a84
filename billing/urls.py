# billing/urls.py
"""
URL configuration for the billing application.

This module defines routes for downloading invoice and
receipt documents.
"""

from django.urls import path
from .views import invoice_pdf, receipt_pdf

# Application namespace for reverse lookups
app_name = "billing"

#: URL patterns for the billing application
urlpatterns = [
    path("factures/<int:pk>/pdf/", invoice_pdf, name="invoice_pdf"),
    path("recus/<int:pk>/pdf/", receipt_pdf, name="receipt_pdf"),
]
