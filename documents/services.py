import logging

from django.db import transaction
from django.utils import timezone

from .models import Document, TrackingEntry

logger = logging.getLogger(__name__)


def record_tracking_entry(document, action, remarks=None):
    """
    Appends a TrackingEntry holding the document's current state.
    """
    entry = TrackingEntry.snapshot(document, action, remarks=remarks)
    entry.save()
    return entry


@transaction.atomic
def register_document(document, session, by_user=None):
    """
    Intake: stamps the document with who forwarded it and when, saves it and
    opens its audit trail. The caller supplies an unsaved Document.
    """
    document.subject = document.subject.upper()
    document.originating_office = document.originating_office.upper()
    document.forwarded_by = session.forwarding_label
    document.status = Document.Status.OPEN
    document.start_date = timezone.now()
    document.deadline = None
    document.created_by = by_user
    document.save()

    record_tracking_entry(document, 'Created')
    logger.info(
        "Registered %s forwarded to %s by %s",
        document.reference_number, document.forwarded_to, session.forwarding_label,
    )
    return document


@transaction.atomic
def update_document_details(document, session, remarks=None):
    """
    Saves edits made to a document's descriptive fields and records them in
    the audit trail.
    """
    document.deadline = None
    document.save()
    entry = record_tracking_entry(document, 'Edited', remarks=remarks or f"Edited by {session.forwarding_label}")
    logger.info("Edited %s by %s", document.reference_number, session.forwarding_label)
    return entry
