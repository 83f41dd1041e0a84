# billing/migrations/0001_initial.py
"""
Initial migration for the billing application.

This migration creates the Invoice, InvoiceItem, InvoicePayment
and Receipt models. Invoices and receipts reference custom orders,
so the custom orders tables must exist first.
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """
    Initial migration class for the billing application.

    Attributes
    ----------
    initial : bool
        Marks this migration as the first for the app.
    dependencies : list
        Declares a dependency on the initial migration of the
        custom orders app and on the swappable user model.
    operations : list
        Creates the billing models with their fields and metadata.
    """

    initial = True

    dependencies = [
        ("custom_orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("invoice_number", models.CharField(max_length=32, unique=True, verbose_name="Numéro")),
                ("customer_name", models.CharField(max_length=200, verbose_name="Client")),
                ("customer_email", models.EmailField(blank=True, max_length=254, null=True, verbose_name="Email")),
                ("customer_phone", models.CharField(blank=True, max_length=32, null=True, verbose_name="Téléphone")),
                ("customer_address", models.CharField(blank=True, max_length=255, null=True, verbose_name="Adresse")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Brouillon"),
                            ("SENT", "Envoyée"),
                            ("PARTIAL", "Partiellement payée"),
                            ("PAID", "Payée"),
                            ("OVERDUE", "En retard"),
                            ("CANCELLED", "Annulée"),
                        ],
                        default="DRAFT",
                        max_length=16,
                        verbose_name="Statut",
                    ),
                ),
                ("issue_date", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Émise le")),
                ("due_date", models.DateField(blank=True, null=True, verbose_name="Échéance")),
                ("paid_date", models.DateTimeField(blank=True, null=True, verbose_name="Payée le")),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Sous-total")),
                ("tax", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Taxes")),
                ("shipping_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Livraison")),
                ("discount", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Remise")),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Total")),
                ("amount_paid", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Montant payé")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "custom_order",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="invoice",
                        to="custom_orders.customorder",
                        verbose_name="Commande sur-mesure",
                    ),
                ),
            ],
            options={"ordering": ["-issue_date"]},
        ),
        migrations.CreateModel(
            name="InvoiceItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("description", models.CharField(max_length=255, verbose_name="Désignation")),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="Quantité")),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Prix unitaire")),
                ("total", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Total")),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="billing.invoice",
                    ),
                ),
            ],
            options={"ordering": ["position", "id"]},
        ),
        migrations.CreateModel(
            name="InvoicePayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Montant")),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("CASH", "Espèces"),
                            ("WAVE", "Wave"),
                            ("ORANGE_MONEY", "Orange Money"),
                            ("MTN_MOBILE_MONEY", "MTN MoMo"),
                            ("MOOV_MONEY", "Moov Money"),
                            ("BANK_TRANSFER", "Virement bancaire"),
                            ("CHECK", "Chèque"),
                            ("PAIEMENTPRO", "PaiementPro"),
                            ("PAYPAL", "PayPal"),
                            ("OTHER", "Autre"),
                        ],
                        default="CASH",
                        max_length=32,
                        verbose_name="Mode de paiement",
                    ),
                ),
                ("reference", models.CharField(blank=True, max_length=64, verbose_name="Référence")),
                ("paid_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Payé le")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="billing.invoice",
                    ),
                ),
            ],
            options={"ordering": ["-paid_at", "-id"]},
        ),
        migrations.CreateModel(
            name="Receipt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("receipt_number", models.CharField(max_length=32, unique=True, verbose_name="Numéro")),
                ("customer_name", models.CharField(max_length=200, verbose_name="Client")),
                ("customer_phone", models.CharField(blank=True, max_length=32, null=True, verbose_name="Téléphone")),
                ("customer_email", models.EmailField(blank=True, max_length=254, null=True, verbose_name="Email")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Montant")),
                ("payment_method", models.CharField(default="CASH", max_length=32, verbose_name="Mode de paiement")),
                ("payment_date", models.DateTimeField(verbose_name="Payé le")),
                ("created_by_name", models.CharField(blank=True, max_length=150, null=True, verbose_name="Reçu par")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Créé le")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "custom_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="receipts",
                        to="custom_orders.customorder",
                    ),
                ),
                (
                    "custom_order_payment",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="receipt",
                        to="custom_orders.customorderpayment",
                    ),
                ),
                (
                    "invoice",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="receipts",
                        to="billing.invoice",
                    ),
                ),
                (
                    "invoice_payment",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="receipt",
                        to="billing.invoicepayment",
                    ),
                ),
            ],
            options={"ordering": ["-payment_date", "-id"]},
        ),
    ]
