"""
ASGI config for the Atelier Sur-Mesure project.

Exposes the ASGI callable as a module-level variable named
``application`` for servers such as Uvicorn or Daphne.
"""

import os
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "atelier_sur_mesure.settings")

application = get_asgi_application()
