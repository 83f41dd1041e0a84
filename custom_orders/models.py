# custom_orders/models.py
"""
Database models for the custom orders application.

This module defines bespoke tailoring orders and what they own:
garment line items, payments received by staff, and a timeline
of events. The invoice derived from an order lives in the billing
application and is reached through ``order.invoice``.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from customers.models import Customer


class PaymentMethod(models.TextChoices):
    """
    Payment methods accepted when staff record a payment.

    These are the free-form source values stored on
    :class:`CustomOrderPayment`; billing maps them onto its own
    closed enumeration when the payment is synchronized.
    """

    CASH = "CASH", "Espèces"
    WAVE = "WAVE", "Wave"
    ORANGE_MONEY = "ORANGE_MONEY", "Orange Money"
    MTN_MOBILE_MONEY = "MTN_MOBILE_MONEY", "MTN MoMo"
    BANK_TRANSFER = "BANK_TRANSFER", "Virement bancaire"
    CHECK = "CHECK", "Chèque"
    CARD = "CARD", "Carte bancaire"
    OTHER = "OTHER", "Autre"


class CustomOrder(models.Model):
    """
    Model representing a bespoke tailoring order.

    Attributes
    ----------
    order_number : CharField
        Unique daily sequence number, e.g. ``SM-191026-0001``.
    customer : ForeignKey
        The customer who placed the order.
    order_date : DateTimeField
        When the order was taken.
    pickup_date : DateField
        Date promised to the customer. Used as the invoice due date.
    status : CharField
        Production status. Choices defined in the Status inner class.
    total_cost : DecimalField
        Sum of ``unit_price * quantity`` over the items.
    material_cost : DecimalField
        Fabric and accessories billed on top of the items.
    notes : TextField
        Free notes.
    created_by : ForeignKey
        Staff member who registered the order.
    """

    class Status(models.TextChoices):
        """
        Enumeration of production statuses.
        """

        PENDING = "PENDING", "En attente"
        IN_PRODUCTION = "IN_PRODUCTION", "En production"
        FITTING = "FITTING", "Essayage prévu"
        ALTERATIONS = "ALTERATIONS", "Retouches en cours"
        READY = "READY", "Prêt"
        DELIVERED = "DELIVERED", "Livré"
        CANCELLED = "CANCELLED", "Annulé"

    order_number = models.CharField("Numéro", max_length=32, unique=True)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="custom_orders",
        verbose_name="Client",
    )
    order_date = models.DateTimeField("Commandée le", default=timezone.now)
    pickup_date = models.DateField("Retrait prévu le")
    status = models.CharField(
        "Statut",
        max_length=32,
        choices=Status.choices,
        default=Status.PENDING,
    )
    total_cost = models.DecimalField(
        "Coût total", max_digits=12, decimal_places=2, default=0
    )
    material_cost = models.DecimalField(
        "Coût matériel", max_digits=12, decimal_places=2, default=0
    )
    notes = models.TextField("Notes", blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Créée par",
    )

    class Meta:
        ordering = ["-order_date"]
        verbose_name = "Commande sur-mesure"
        verbose_name_plural = "Commandes sur-mesure"

    def __str__(self) -> str:
        return f"{self.order_number} - {self.customer}"


class CustomOrderItem(models.Model):
    """
    Garment line item of a custom order.

    Attributes
    ----------
    order : ForeignKey
        The owning order.
    garment_type : CharField
        Kind of garment (e.g. "Boubou", "Costume").
    custom_type : CharField
        Optional precision on the garment type.
    description : TextField
        Optional free description.
    quantity : PositiveIntegerField
        Number of garments, at least 1.
    unit_price : DecimalField
        Price of one garment.
    """

    order = models.ForeignKey(
        CustomOrder,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name="Commande",
    )
    garment_type = models.CharField("Type de vêtement", max_length=100)
    custom_type = models.CharField("Précision", max_length=100, blank=True)
    description = models.TextField("Description", blank=True)
    quantity = models.PositiveIntegerField("Quantité", default=1)
    unit_price = models.DecimalField(
        "Prix unitaire", max_digits=12, decimal_places=2, default=0
    )

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.label} x{self.quantity}"

    @property
    def label(self) -> str:
        """Garment type followed by its precision, when any."""
        if self.custom_type:
            return f"{self.garment_type} - {self.custom_type}"
        return self.garment_type

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CustomOrderPayment(models.Model):
    """
    Money received by staff against a custom order.

    Once synchronized with billing, ``invoice_payment`` points at the
    matching invoice-level payment and ``receipt`` (reverse accessor
    from billing) holds the proof of payment.

    Attributes
    ----------
    order : ForeignKey
        The order the money was received for.
    amount : DecimalField
        Amount received, strictly positive.
    payment_type : CharField
        Deposit, installment or final balance.
    payment_method : CharField
        Source payment method as entered by staff. May be empty.
    notes : TextField
        Free notes.
    paid_at : DateTimeField
        When the money was received.
    received_by : ForeignKey
        Staff member who received the money.
    invoice_payment : OneToOneField
        Invoice-level payment created by the synchronization.
    """

    class PaymentType(models.TextChoices):
        DEPOSIT = "DEPOSIT", "Avance"
        INSTALLMENT = "INSTALLMENT", "Acompte"
        FINAL = "FINAL", "Solde"

    order = models.ForeignKey(
        CustomOrder,
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name="Commande",
    )
    amount = models.DecimalField("Montant", max_digits=12, decimal_places=2)
    payment_type = models.CharField(
        "Type",
        max_length=16,
        choices=PaymentType.choices,
        default=PaymentType.INSTALLMENT,
    )
    payment_method = models.CharField(
        "Mode de paiement",
        max_length=32,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )
    notes = models.TextField("Notes", blank=True)
    paid_at = models.DateTimeField("Payé le", default=timezone.now)
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="received_custom_order_payments",
        verbose_name="Reçu par",
    )
    invoice_payment = models.OneToOneField(
        "billing.InvoicePayment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="custom_order_payment",
        verbose_name="Paiement facture",
    )

    class Meta:
        ordering = ["-paid_at", "-id"]

    def __str__(self) -> str:
        return f"{self.get_payment_type_display()} {self.amount} ({self.order.order_number})"


class CustomOrderTimeline(models.Model):
    """
    Append-only history entry of a custom order.

    Attributes
    ----------
    order : ForeignKey
        The order the event belongs to.
    event : CharField
        Short event title, e.g. "Paiement reçu: Avance".
    description : TextField
        Human readable details.
    user : ForeignKey
        Staff member at the origin of the event.
    user_name : CharField
        Display name of the staff member at the time of the event.
    created_at : DateTimeField
        When the event happened.
    """

    order = models.ForeignKey(
        CustomOrder,
        on_delete=models.CASCADE,
        related_name="timeline",
    )
    event = models.CharField("Événement", max_length=200)
    description = models.TextField("Détails", blank=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    user_name = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField("Le", default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.order.order_number}: {self.event}"
