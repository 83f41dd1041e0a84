# billing/numbering.py
"""
Sequential document numbers.

Invoices, receipts and custom orders are numbered
``TAG-DDMMYY-NNNN``: a tag, the day of creation and a four digit
counter restarting at 0001 every day. The next number is derived
from the greatest number already stored for the day, so numbers
are never reserved ahead of the insert.

Two concurrent writers can compute the same number. The unique
constraint on the number column decides who wins, and
:func:`save_with_number` makes the loser try again with a fresh
number.

The counter has four digits. A 10000th number on the same day sorts
below ``...-9999``, so allocations past 9999 a day keep colliding
and end in :class:`NumberAllocationError`.
"""

import logging
from datetime import date

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import NumberAllocationError

logger = logging.getLogger(__name__)

SEQUENCE_WIDTH = 4


def build_prefix(tag: str, day: date) -> str:
    """
    Build the daily prefix of a document number.

    Parameters
    ----------
    tag : str
        Document tag, e.g. ``"FAC"``.
    day : date
        Day of creation.

    Returns
    -------
    str
        Prefix such as ``"FAC-191026-"``.
    """
    return f"{tag}-{day:%d%m%y}-"


def next_number(model, field: str, tag: str, day: date | None = None) -> str:
    """
    Compute the next free number of the day for ``model.field``.

    Parameters
    ----------
    model : type[Model]
        Model holding the numbered rows.
    field : str
        Name of the unique number column.
    tag : str
        Document tag.
    day : date, optional
        Day to number for. Defaults to today in the current time zone.

    Returns
    -------
    str
        The greatest number of the day plus one, or ``...-0001`` when
        nothing was numbered yet that day.
    """
    day = day or timezone.localdate()
    prefix = build_prefix(tag, day)
    last = (
        model.objects.filter(**{f"{field}__startswith": prefix})
        .order_by(f"-{field}")
        .values_list(field, flat=True)
        .first()
    )
    sequence = 1
    if last:
        suffix = last[len(prefix):]
        if suffix.isdigit():
            sequence = int(suffix) + 1
    return f"{prefix}{sequence:0{SEQUENCE_WIDTH}d}"


def save_with_number(instance, field: str, tag: str, attempts: int | None = None, day: date | None = None):
    """
    Number and insert ``instance``, retrying on number collisions.

    Each attempt runs in its own savepoint so a failed insert does not
    break the enclosing transaction.

    Parameters
    ----------
    instance : Model
        Unsaved model instance.
    field : str
        Name of the unique number column to fill.
    tag : str
        Document tag.
    attempts : int, optional
        Retry budget. Defaults to ``settings.BILLING_NUMBER_ATTEMPTS``.
    day : date, optional
        Day to number for, see :func:`next_number`.

    Returns
    -------
    Model
        The saved instance, with its number set.

    Raises
    ------
    NumberAllocationError
        If every attempt collided with an existing number.
    IntegrityError
        If the insert failed for another reason than the number.
    """
    model = type(instance)
    attempts = attempts or getattr(settings, "BILLING_NUMBER_ATTEMPTS", 5)

    for attempt in range(1, attempts + 1):
        number = next_number(model, field, tag, day=day)
        setattr(instance, field, number)
        try:
            with transaction.atomic():
                instance.save(force_insert=True)
            return instance
        except IntegrityError:
            instance.pk = None
            if not model.objects.filter(**{field: number}).exists():
                raise
            logger.warning(
                "Number %s already taken for %s (attempt %d/%d)",
                number,
                model.__name__,
                attempt,
                attempts,
            )

    raise NumberAllocationError(
        f"Impossible d'allouer un numéro {tag} après {attempts} tentatives"
    )
