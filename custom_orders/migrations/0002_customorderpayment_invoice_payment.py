# custom_orders/migrations/0002_customorderpayment_invoice_payment.py
"""
Link custom order payments to their invoice payment.

Kept apart from 0001 because the billing tables depend on the
custom order tables.
"""

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ("billing", "0001_initial"),
        ("custom_orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="customorderpayment",
            name="invoice_payment",
            field=models.OneToOneField(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="custom_order_payment",
                to="billing.invoicepayment",
                verbose_name="Paiement facture",
            ),
        ),
    ]
