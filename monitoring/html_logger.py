# monitoring/html_logger.py
"""
HTML journal for the monitoring application.

This module provides simple logging functions (info, warn, error)
that append entries to an HTML file readable by staff from the
monitoring view. Each entry is also forwarded to the ``monitoring``
logger, so the console and any handler configured in ``LOGGING``
see the same events.

Messages are HTML-escaped before being written.
"""

import logging
from pathlib import Path

from django.conf import settings
from django.utils.html import escape
from django.utils.timezone import now

logger = logging.getLogger("monitoring")

LOG_FILE_NAME = "app.log.html"

# HTML header written once when the journal is created
HEADER = """<!doctype html>
<html lang="fr"><head><meta charset="utf-8"><title>Journaux</title>
<style>
.log-info{ background:#e3f2fd; color:#0d47a1; padding:.5rem; border-left:4px solid #1976d2; margin:.25rem 0; }
.log-warn{ background:#fff8e1; color:#e65100; padding:.5rem; border-left:4px solid #ff9800; margin:.25rem 0; }
.log-error{ background:#ffebee; color:#b71c1c; padding:.5rem; border-left:4px solid #f44336; margin:.25rem 0; }
</style></head><body>
<h3>Journaux de l'atelier</h3>
"""


def log_file() -> Path:
    """
    Return the path of the journal file.

    The directory comes from ``settings.MONITORING_LOG_DIR`` and
    defaults to ``BASE_DIR / "logs"``.
    """
    log_dir = getattr(settings, "MONITORING_LOG_DIR", None) or Path(settings.BASE_DIR) / "logs"
    return Path(log_dir) / LOG_FILE_NAME


def _append(level: str, message: str):
    """
    Append a single entry to the journal.

    Parameters
    ----------
    level : str
        ``"info"``, ``"warn"`` or ``"error"``.
    message : str
        Plain text message, escaped here.
    """
    path = log_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.write_text(HEADER, encoding="utf-8")

    ts = now().strftime("%Y-%m-%d %H:%M:%S")
    line = (
        f'<div class="log-{level}"><strong>[{level.upper()} {ts}]</strong> '
        f"{escape(message)}</div>"
    )
    with path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")


def info(message: str):
    """
    Log an informational message.

    Parameters
    ----------
    message : str
        The message to log.
    """
    logger.info(message)
    _append("info", message)


def warn(message: str):
    """
    Log a warning message.

    Parameters
    ----------
    message : str
        The message to log.
    """
    logger.warning(message)
    _append("warn", message)


def error(message: str):
    """
    Log an error message.

    Parameters
    ----------
    message : str
        The message to log.
    """
    logger.error(message)
    _append("error", message)
