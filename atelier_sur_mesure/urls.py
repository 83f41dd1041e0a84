"""
Root URL configuration for the Atelier Sur-Mesure project.

This module defines the global URL routes and delegates
to application-specific ``urls.py`` modules.

For more details, see:
https://docs.djangoproject.com/en/stable/topics/http/urls/
"""

from django.contrib import admin
from django.urls import path, include

#: Global URL patterns for the project
urlpatterns = [
    # Django admin interface
    path("admin/", admin.site.urls),

    # Custom orders (payments recorded by staff)
    path("commandes/", include("custom_orders.urls")),

    # Billing (invoice and receipt documents)
    path("facturation/", include("billing.urls")),

    # Monitoring application (application journal)
    path("monitoring/", include("monitoring.urls")),
]
