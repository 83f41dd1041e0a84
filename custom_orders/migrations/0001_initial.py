# custom_orders/migrations/0001_initial.py
"""
Initial migration for the custom orders application.

Creates CustomOrder, CustomOrderItem, CustomOrderPayment and
CustomOrderTimeline. The link from a payment to its invoice
payment is added in 0002, once the billing tables exist.
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """
    Initial migration class for the custom orders application.

    Attributes
    ----------
    dependencies : list
        The customer table and the swappable user model.
    """

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(max_length=32, unique=True, verbose_name="Numéro")),
                ("order_date", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Commandée le")),
                ("pickup_date", models.DateField(verbose_name="Retrait prévu le")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "En attente"),
                            ("IN_PRODUCTION", "En production"),
                            ("FITTING", "Essayage prévu"),
                            ("ALTERATIONS", "Retouches en cours"),
                            ("READY", "Prêt"),
                            ("DELIVERED", "Livré"),
                            ("CANCELLED", "Annulé"),
                        ],
                        default="PENDING",
                        max_length=32,
                        verbose_name="Statut",
                    ),
                ),
                ("total_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Coût total")),
                ("material_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Coût matériel")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Créée par",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="custom_orders",
                        to="customers.customer",
                        verbose_name="Client",
                    ),
                ),
            ],
            options={
                "ordering": ["-order_date"],
                "verbose_name": "Commande sur-mesure",
                "verbose_name_plural": "Commandes sur-mesure",
            },
        ),
        migrations.CreateModel(
            name="CustomOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("garment_type", models.CharField(max_length=100, verbose_name="Type de vêtement")),
                ("custom_type", models.CharField(blank=True, max_length=100, verbose_name="Précision")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="Quantité")),
                ("unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="Prix unitaire")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="custom_orders.customorder",
                        verbose_name="Commande",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="CustomOrderPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="Montant")),
                (
                    "payment_type",
                    models.CharField(
                        choices=[("DEPOSIT", "Avance"), ("INSTALLMENT", "Acompte"), ("FINAL", "Solde")],
                        default="INSTALLMENT",
                        max_length=16,
                        verbose_name="Type",
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("CASH", "Espèces"),
                            ("WAVE", "Wave"),
                            ("ORANGE_MONEY", "Orange Money"),
                            ("MTN_MOBILE_MONEY", "MTN MoMo"),
                            ("BANK_TRANSFER", "Virement bancaire"),
                            ("CHECK", "Chèque"),
                            ("CARD", "Carte bancaire"),
                            ("OTHER", "Autre"),
                        ],
                        max_length=32,
                        null=True,
                        verbose_name="Mode de paiement",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("paid_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Payé le")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="custom_orders.customorder",
                        verbose_name="Commande",
                    ),
                ),
                (
                    "received_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="received_custom_order_payments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reçu par",
                    ),
                ),
            ],
            options={"ordering": ["-paid_at", "-id"]},
        ),
        migrations.CreateModel(
            name="CustomOrderTimeline",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event", models.CharField(max_length=200, verbose_name="Événement")),
                ("description", models.TextField(blank=True, verbose_name="Détails")),
                ("user_name", models.CharField(blank=True, max_length=150)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Le")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="timeline",
                        to="custom_orders.customorder",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
    ]
