# customers/apps.py
"""
Application configuration for the customers module.
"""

from django.apps import AppConfig


class CustomersConfig(AppConfig):
    """
    Configuration class for the customers application.

    Attributes
    ----------
    default_auto_field : str
        Default primary key field type for models that do not
        explicitly define one.
    name : str
        Full Python path to the application.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "customers"
    verbose_name = "Clients"
