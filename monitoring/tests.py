# monitoring/tests.py
"""
Tests for the application journal and its staff view.
"""

import tempfile

from django.contrib.auth.models import User
from django.test import TestCase, override_settings
from django.urls import reverse

from monitoring.html_logger import error, info, log_file, warn


class JournalTest(TestCase):
    """
    Test cases for the HTML journal.

    Each test writes into its own temporary directory.
    """

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.settings_override = override_settings(MONITORING_LOG_DIR=self.tmp.name)
        self.settings_override.enable()
        self.addCleanup(self.settings_override.disable)

    def test_entries_are_appended(self):
        info("Facture créée")
        warn("Paiement non synchronisé")
        error("PDF impossible")

        html = log_file().read_text(encoding="utf-8")
        self.assertTrue(html.startswith("<!doctype html>"))
        self.assertIn('class="log-info"', html)
        self.assertIn('class="log-warn"', html)
        self.assertIn('class="log-error"', html)
        self.assertIn("Facture créée", html)

    def test_messages_are_escaped(self):
        info("<script>alert(1)</script>")

        html = log_file().read_text(encoding="utf-8")
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)

    def test_entries_reach_logging(self):
        with self.assertLogs("monitoring", level="INFO") as logs:
            warn("Reçu non envoyé")
        self.assertIn("Reçu non envoyé", logs.output[0])

    def test_logs_view(self):
        staff = User.objects.create_user("awa", password="x", is_staff=True)
        self.client.force_login(staff)

        resp = self.client.get(reverse("monitoring:logs"))
        self.assertContains(resp, "Aucun log pour le moment.")

        info("Commande SM-191026-0001 créée")
        resp = self.client.get(reverse("monitoring:logs"))
        self.assertContains(resp, "Commande SM-191026-0001 créée")

    def test_logs_view_is_staff_only(self):
        User.objects.create_user("cliente", password="x")
        self.client.login(username="cliente", password="x")

        resp = self.client.get(reverse("monitoring:logs"))

        self.assertEqual(resp.status_code, 302)
