# customers/migrations/0001_initial.py
"""
Initial migration for the customers application.

This migration creates the Customer model.
"""

from django.db import migrations, models


class Migration(migrations.Migration):
    """
    Initial migration class for the customers application.
    """

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=200, verbose_name="Nom")),
                ("phone", models.CharField(max_length=32, verbose_name="Téléphone")),
                ("email", models.EmailField(blank=True, max_length=254, null=True, verbose_name="Email")),
                ("city", models.CharField(blank=True, max_length=100, verbose_name="Ville")),
                ("country", models.CharField(blank=True, max_length=100, verbose_name="Pays")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Créé le")),
            ],
            options={"ordering": ["name", "phone"]},
        ),
    ]
