# custom_orders/exceptions.py
"""
Custom exceptions for the custom orders application.

This module defines domain-specific exceptions raised when
staff input about an order or its payments is rejected.
"""


class CustomOrderError(Exception):
    """
    Base class for custom order errors.

    All custom exceptions related to custom orders inherit from
    this class. Views translate them into HTTP 400 responses.
    """


class InvalidPaymentAmount(CustomOrderError):
    """
    Raised when a payment amount is missing, not a number,
    or not strictly positive.
    """


class InvalidPaymentMethod(CustomOrderError):
    """
    Raised when a payment method is not one of the accepted
    payment methods.
    """
