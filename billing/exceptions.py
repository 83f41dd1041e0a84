# billing/exceptions.py
"""
Custom exceptions for the billing application.

This module defines domain-specific exceptions used for
error handling in invoice synchronization, document numbering,
PDF generation, and receipt notifications.
"""


class BillingError(Exception):
    """
    Base class for billing-related errors.

    All billing exceptions should inherit from this class
    to allow grouped exception handling.
    """


class InvoiceSyncError(BillingError):
    """
    Raised when an order or a payment cannot be reflected in billing.

    Carries a human readable French message that views can show
    as is.
    """


class CustomOrderNotFound(InvoiceSyncError):
    """
    Raised when the custom order to invoice does not exist.
    """

    def __init__(self, message: str = "Commande sur-mesure non trouvée"):
        super().__init__(message)


class PaymentNotFound(InvoiceSyncError):
    """
    Raised when the payment to synchronize does not exist,
    or does not belong to the given order.
    """

    def __init__(self, message: str = "Paiement non trouvé"):
        super().__init__(message)


class NumberAllocationError(BillingError):
    """
    Raised when no free document number could be allocated.

    Happens when concurrent writers keep taking the generated
    number and the retry budget is exhausted.
    """


class PDFGenerationError(BillingError):
    """
    Raised when invoice or receipt PDF generation fails.

    Used when ReportLab or file I/O errors prevent
    successful PDF creation.
    """


class NotificationError(BillingError):
    """
    Raised when a receipt notification cannot be delivered.

    Typically indicates an unreachable SMS gateway or a
    rejected request.
    """
