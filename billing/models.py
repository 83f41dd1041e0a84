# billing/models.py
"""
Database models for the billing application.

This module defines the financial documents derived from custom
orders: the Invoice with its items and payments, and the Receipt
issued for every synchronized payment.

Customer fields on invoices and receipts are snapshots written at
creation time. They are never refreshed from the customer record,
so a document keeps showing what was true when it was issued.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Invoice(models.Model):
    """
    Invoice derived from a custom order.

    Attributes
    ----------
    invoice_number : CharField
        Unique daily sequence number, e.g. ``FAC-191026-0001``.
    custom_order : OneToOneField
        The order this invoice bills. At most one invoice per order.
    customer_name, customer_email, customer_phone, customer_address : fields
        Customer snapshot taken when the invoice was created.
    status : CharField
        Lifecycle status. Choices defined in the Status inner class.
    issue_date : DateTimeField
        Date of issue, the order date for materialized invoices.
    due_date : DateField
        Due date, the pickup date for materialized invoices.
    paid_date : DateTimeField
        Set when the invoice becomes fully paid, null otherwise.
    subtotal, tax, shipping_cost, discount, total : DecimalField
        Amounts of the invoice.
    amount_paid : DecimalField
        Sum of the amounts of the invoice payments.
    notes : TextField
        Free notes printed on the document.
    created_by : ForeignKey
        Staff member at the origin of the invoice.
    """

    class Status(models.TextChoices):
        """
        Enumeration of invoice statuses.

        DRAFT
            Invoice is being prepared.
        SENT
            Invoice has been issued and nothing is paid yet.
        PARTIAL
            Some payments were received but the total is not covered.
        PAID
            Payments cover the total.
        OVERDUE
            Due date passed without full payment.
        CANCELLED
            Invoice has been cancelled.
        """

        DRAFT = "DRAFT", "Brouillon"
        SENT = "SENT", "Envoyée"
        PARTIAL = "PARTIAL", "Partiellement payée"
        PAID = "PAID", "Payée"
        OVERDUE = "OVERDUE", "En retard"
        CANCELLED = "CANCELLED", "Annulée"

    invoice_number = models.CharField("Numéro", max_length=32, unique=True)
    custom_order = models.OneToOneField(
        "custom_orders.CustomOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoice",
        verbose_name="Commande sur-mesure",
    )
    customer_name = models.CharField("Client", max_length=200)
    customer_email = models.EmailField("Email", null=True, blank=True)
    customer_phone = models.CharField("Téléphone", max_length=32, null=True, blank=True)
    customer_address = models.CharField("Adresse", max_length=255, null=True, blank=True)
    status = models.CharField(
        "Statut",
        max_length=16,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    issue_date = models.DateTimeField("Émise le", default=timezone.now)
    due_date = models.DateField("Échéance", null=True, blank=True)
    paid_date = models.DateTimeField("Payée le", null=True, blank=True)
    subtotal = models.DecimalField("Sous-total", max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField("Taxes", max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField("Livraison", max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField("Remise", max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField("Total", max_digits=12, decimal_places=2, default=0)
    amount_paid = models.DecimalField("Montant payé", max_digits=12, decimal_places=2, default=0)
    notes = models.TextField("Notes", blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        """
        Metadata for the Invoice model.

        Attributes
        ----------
        ordering : list
            Default ordering by most recent issue date.
        """

        ordering = ["-issue_date"]

    def __str__(self) -> str:
        """
        Return a string representation of the invoice.

        Returns
        -------
        str
            The invoice number, customer and status.
        """
        return f"Facture {self.invoice_number} - {self.customer_name} ({self.status})"

    @property
    def balance(self):
        """Amount still due on the invoice."""
        return self.total - self.amount_paid


class InvoiceItem(models.Model):
    """
    Line of an invoice.

    ``position`` keeps the order in which lines were materialized
    from the custom order.
    """

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="items",
    )
    position = models.PositiveIntegerField(default=0)
    description = models.CharField("Désignation", max_length=255)
    quantity = models.PositiveIntegerField("Quantité", default=1)
    unit_price = models.DecimalField("Prix unitaire", max_digits=12, decimal_places=2)
    total = models.DecimalField("Total", max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity}"


class InvoicePayment(models.Model):
    """
    One payment applied against an invoice.

    Attributes
    ----------
    invoice : ForeignKey
        The invoice being paid.
    amount : DecimalField
        Amount of the payment.
    payment_method : CharField
        Closed enumeration of payment methods, see Method.
    reference : CharField
        Short human-scannable reference. Not guaranteed unique.
    paid_at : DateTimeField
        When the money was received.
    notes : TextField
        Free notes copied from the source payment.
    created_by : ForeignKey
        Staff member who recorded the payment.
    """

    class Method(models.TextChoices):
        CASH = "CASH", "Espèces"
        WAVE = "WAVE", "Wave"
        ORANGE_MONEY = "ORANGE_MONEY", "Orange Money"
        MTN_MOBILE_MONEY = "MTN_MOBILE_MONEY", "MTN MoMo"
        MOOV_MONEY = "MOOV_MONEY", "Moov Money"
        BANK_TRANSFER = "BANK_TRANSFER", "Virement bancaire"
        CHECK = "CHECK", "Chèque"
        PAIEMENTPRO = "PAIEMENTPRO", "PaiementPro"
        PAYPAL = "PAYPAL", "PayPal"
        OTHER = "OTHER", "Autre"

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="payments",
    )
    amount = models.DecimalField("Montant", max_digits=12, decimal_places=2)
    payment_method = models.CharField(
        "Mode de paiement",
        max_length=32,
        choices=Method.choices,
        default=Method.CASH,
    )
    reference = models.CharField("Référence", max_length=64, blank=True)
    paid_at = models.DateTimeField("Payé le", default=timezone.now)
    notes = models.TextField("Notes", blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-paid_at", "-id"]

    def __str__(self) -> str:
        return f"{self.amount} ({self.payment_method}) - {self.invoice.invoice_number}"


class Receipt(models.Model):
    """
    Proof of payment issued for a synchronized payment.

    Receipts are never edited. They only disappear when the payment
    they prove is deleted.

    Attributes
    ----------
    receipt_number : CharField
        Unique daily sequence number, e.g. ``REC-191026-0001``.
    custom_order_payment : OneToOneField
        The order-side payment this receipt proves.
    invoice_payment : OneToOneField
        The invoice-side payment created for the same money.
    invoice : ForeignKey
        Invoice the payment was applied to.
    custom_order : ForeignKey
        Order the payment was received for.
    customer_name, customer_phone, customer_email : fields
        Customer snapshot.
    amount : DecimalField
        Amount received.
    payment_method : CharField
        Source payment method as entered by staff.
    payment_date : DateTimeField
        When the money was received.
    created_by : ForeignKey
        Staff member who triggered the synchronization.
    created_by_name : CharField
        Display name of the staff member who received the money.
    """

    receipt_number = models.CharField("Numéro", max_length=32, unique=True)
    custom_order_payment = models.OneToOneField(
        "custom_orders.CustomOrderPayment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="receipt",
    )
    invoice_payment = models.OneToOneField(
        InvoicePayment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="receipt",
    )
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="receipts",
    )
    custom_order = models.ForeignKey(
        "custom_orders.CustomOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="receipts",
    )
    customer_name = models.CharField("Client", max_length=200)
    customer_phone = models.CharField("Téléphone", max_length=32, null=True, blank=True)
    customer_email = models.EmailField("Email", null=True, blank=True)
    amount = models.DecimalField("Montant", max_digits=12, decimal_places=2)
    payment_method = models.CharField("Mode de paiement", max_length=32, default="CASH")
    payment_date = models.DateTimeField("Payé le")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_by_name = models.CharField("Reçu par", max_length=150, null=True, blank=True)
    created_at = models.DateTimeField("Créé le", auto_now_add=True)

    class Meta:
        ordering = ["-payment_date", "-id"]

    def __str__(self) -> str:
        return f"Reçu {self.receipt_number} - {self.customer_name} - {self.amount}"
