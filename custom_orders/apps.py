# custom_orders/apps.py
"""
Application configuration for the custom orders module.

This module defines the Django application configuration
for the custom orders app.
"""

from django.apps import AppConfig


class CustomOrdersConfig(AppConfig):
    """
    Configuration class for the custom orders application.

    Attributes
    ----------
    default_auto_field : str
        Specifies the type of primary key field to use for models
        that do not define one explicitly.
    name : str
        The full Python path to the application.
    verbose_name : str
        Name shown in the admin.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "custom_orders"
    verbose_name = "Commandes sur-mesure"
