# monitoring/urls.py
"""
URL configuration for the monitoring application.

Staff read the application journal at ``/monitoring/logs/``.
"""

from django.urls import path
from .views import logs_view

app_name = "monitoring"

urlpatterns = [
    path("logs/", logs_view, name="logs"),
]
