# customers/models.py
"""
Database models for the customers application.

This module defines the Customer model. Customers are owned by
the storefront side of the platform; the tailoring workflow only
reads them to snapshot contact details on invoices and receipts.
"""

from django.db import models


class Customer(models.Model):
    """
    Model representing a customer of the atelier.

    Attributes
    ----------
    name : CharField
        Display name of the customer. May be blank for customers
        registered with a phone number only (verbose name: 'Nom').
    phone : CharField
        Phone number used for notifications (verbose name: 'Téléphone').
    email : EmailField
        Optional email address.
    city : CharField
        Optional city (verbose name: 'Ville').
    country : CharField
        Optional country (verbose name: 'Pays').
    created_at : DateTimeField
        Timestamp when the customer was registered.
    """

    name = models.CharField("Nom", max_length=200, blank=True)
    phone = models.CharField("Téléphone", max_length=32)
    email = models.EmailField("Email", null=True, blank=True)
    city = models.CharField("Ville", max_length=100, blank=True)
    country = models.CharField("Pays", max_length=100, blank=True)
    created_at = models.DateTimeField("Créé le", auto_now_add=True)

    class Meta:
        """
        Metadata for the Customer model.

        Attributes
        ----------
        ordering : list
            Default ordering by name, then phone number.
        """

        ordering = ["name", "phone"]

    def __str__(self) -> str:
        """
        Return a string representation of the customer.

        Returns
        -------
        str
            The customer name, or the phone number when no name is set.
        """
        return self.name or self.phone

    @property
    def address_line(self) -> str:
        """
        Join the non-empty parts of the customer location.

        Returns
        -------
        str
            ``"city, country"`` with empty parts left out, or an
            empty string when neither is known.
        """
        return ", ".join(part for part in (self.city, self.country) if part)
