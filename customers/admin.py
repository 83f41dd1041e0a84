# customers/admin.py
"""
Admin configuration for the customers application.
"""

from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Customer model.

    Attributes
    ----------
    list_display : tuple
        Name, phone, email, city and registration date.
    search_fields : tuple
        Name, phone and email.
    """

    list_display = ("name", "phone", "email", "city", "created_at")
    list_filter = ("country",)
    search_fields = ("name", "phone", "email")
