import re

from django.conf import settings
from django.db import transaction
from django.utils import timezone


def reference_prefix():
    return getattr(settings, 'AWD_REFERENCE_PREFIX', 'AWD')


def reference_pattern(year=None):
    year_part = str(year) if year else r'(\d{4})'
    return re.compile(rf'^{re.escape(reference_prefix())}-{year_part}-(\d{{4,}})$')


def parse_reference_number(value):
    """
    Splits 'AWD-2024-0012' into (2024, 12). Returns None for codes that do
    not follow the pattern (they can be typed in by hand at intake).
    """
    if not value:
        return None
    match = reference_pattern().match(value.strip())
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def format_reference_number(year, sequence):
    return f"{reference_prefix()}-{year}-{sequence:04d}"


def next_reference_number(year=None):
    """
    Next free code for the year: highest existing sequence + 1.

    Runs in a transaction and locks the year's rows, but a brand new row
    inserted concurrently can still collide. The unique constraint on
    Document.reference_number turns that into an IntegrityError for the
    caller instead of a silent duplicate.
    """
    from .models import Document

    year = year or timezone.localdate().year
    pattern = reference_pattern(year)

    with transaction.atomic():
        codes = Document.objects.select_for_update().filter(
            reference_number__startswith=f"{reference_prefix()}-{year}-"
        ).values_list('reference_number', flat=True)

        highest = 0
        for code in codes:
            match = pattern.match(code)
            if match:
                highest = max(highest, int(match.group(1)))

    return format_reference_number(year, highest + 1)


def reference_sort_key(value):
    """
    Sort key used for in-memory lists: numeric suffix first, then the code.
    """
    match = re.search(r'(\d+)$', value or '')
    return (int(match.group(1)) if match else 0, value or '')
