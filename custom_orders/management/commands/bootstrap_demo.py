# custom_orders/management/commands/bootstrap_demo.py
"""
Management command to initialize demo data.

This command creates a staff account, a demo customer and a
custom order with a deposit, so that an invoice and a receipt
are available right away. It can be executed using::

    python manage.py bootstrap_demo
"""

from datetime import timedelta

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.utils import timezone

from custom_orders.models import CustomOrder
from custom_orders.services import create_custom_order
from customers.models import Customer


class Command(BaseCommand):
    """
    Django management command for demo initialization.

    Creates:
    - An administrator account.
    - A demo customer.
    - A custom order of two garments with material cost and a
      deposit, unless the customer already has one.

    Attributes
    ----------
    help : str
        Short description displayed in ``python manage.py help``.
    """

    help = "Create a staff account, a customer and a custom order with its invoice."

    def handle(self, *args, **options):
        """
        Execute the command.

        Notes
        -----
        - Admin credentials: ``admin/admin123``.
        - Running the command twice does not duplicate the order.
        """
        # --- Create administrator account ---
        admin, created = User.objects.get_or_create(
            username="admin",
            defaults={"is_staff": True, "is_superuser": True, "first_name": "Awa", "last_name": "Koné"},
        )
        if created:
            admin.set_password("admin123")
            admin.save()
            self.stdout.write(self.style.SUCCESS("Admin : admin/admin123"))

        # --- Create demo customer ---
        customer, _ = Customer.objects.get_or_create(
            phone="0701020304",
            defaults={
                "name": "Aminata Traoré",
                "email": "aminata@example.org",
                "city": "Abidjan",
                "country": "Côte d'Ivoire",
            },
        )

        if CustomOrder.objects.filter(customer=customer).exists():
            self.stdout.write("Demo order already present.")
            return

        # --- Create demo order with deposit ---
        order = create_custom_order(
            customer,
            [
                {"garment_type": "Boubou", "custom_type": "Grand boubou", "quantity": 1, "unit_price": 10000},
                {"garment_type": "Chemise", "description": "Col mao", "quantity": 2, "unit_price": 5000},
            ],
            pickup_date=timezone.localdate() + timedelta(days=14),
            material_cost=3000,
            deposit=10000,
            deposit_method="WAVE",
            actor=admin,
        )
        self.stdout.write(
            self.style.SUCCESS(f"Commande {order.order_number} / facture {order.invoice.invoice_number}")
        )
