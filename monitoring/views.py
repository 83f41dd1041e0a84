# monitoring/views.py
"""
Views for the monitoring application.

This module lets staff read the application journal directly
from the browser.
"""

from django.contrib.admin.views.decorators import staff_member_required
from django.http import HttpResponse
from django.views.decorators.http import require_GET

from .html_logger import log_file


@staff_member_required
@require_GET
def logs_view(request):
    """
    Display the application journal.

    Restricted to staff members only. The journal file is already
    a complete HTML page, so it is returned as is.

    Parameters
    ----------
    request : HttpRequest
        The current HTTP request.

    Returns
    -------
    HttpResponse
        The journal, or a placeholder page if nothing was logged yet.
    """
    path = log_file()

    # Read the journal if available, otherwise fallback with a placeholder
    if path.exists():
        html = path.read_text(encoding="utf-8")
    else:
        html = "<!doctype html><html lang=\"fr\"><body><p>Aucun log pour le moment.</p></body></html>"

    return HttpResponse(html, content_type="text/html; charset=utf-8")
