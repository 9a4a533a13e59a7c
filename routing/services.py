import logging
from collections import namedtuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounts.models import Division
from documents.models import Document, MandayRecord, ReturnRecord, TrackingEntry
from documents.services import record_tracking_entry
from .deadlines import remaining_business_days
from .transitions import Action, require_allowed

logger = logging.getLogger(__name__)

Status = Document.Status

BulkResult = namedtuple('BulkResult', ['succeeded', 'failed'])


def _log(document, action, session):
    logger.info(
        "%s: %s by %s -> status=%s holder=%s",
        document.reference_number, action, session.forwarding_label,
        document.status, document.forwarded_to,
    )


def _last_division(document):
    """
    The most recent named division the document was forwarded to, taken
    from its audit trail.
    """
    entry = document.tracking_entries.filter(
        forwarded_to__in=Division.routing_divisions()
    ).order_by('-action_timestamp', '-id').first()
    return entry.forwarded_to if entry else ''


def _acquire(document, action):
    """
    Locks the document's row until the surrounding transaction ends, reloads
    it, then checks `action` against the state it is really in.
    """
    Document.objects.select_for_update().only('pk').get(pk=document.pk)
    document.refresh_from_db()
    require_allowed(document, action)


def _require_destination(destination, allowed):
    if destination not in allowed:
        raise ValidationError(f"{destination or 'No destination'} is not a valid destination.")


@transaction.atomic
def assign_inspector_and_close(document, session, inspector, remarks=None):
    """
    Intake closes a document that came back to it, naming the inspector who
    handled it, and books the planned vs actual working days.
    """
    _acquire(document, Action.ASSIGN_AND_CLOSE)
    if not inspector:
        raise ValidationError("An inspector must be assigned before closing.")

    today = timezone.localdate()
    start = timezone.localtime(document.start_date).date()

    document.status = Status.CLOSED
    document.assigned_inspector = inspector
    document.end_date = today
    document.forwarded_by = session.forwarding_label
    document.remarks = remarks or f"Closed - Assigned to {inspector}"
    document.save()

    MandayRecord.objects.create(
        document=document,
        reference_number=document.reference_number,
        original_working_days=document.working_days,
        actual_working_days=max(remaining_business_days(start, today), 1),
        inspector_name=inspector,
        division=_last_division(document),
        start_date=start,
        end_date=today,
    )
    entry = record_tracking_entry(document, Action.ASSIGN_AND_CLOSE.label)
    _log(document, Action.ASSIGN_AND_CLOSE, session)
    return entry


@transaction.atomic
def hold_document(document, session, inspector, remarks=None):
    _acquire(document, Action.HOLD)
    if not inspector:
        raise ValidationError("An inspector must be assigned to a held document.")

    document.status = Status.ON_HOLD
    document.assigned_inspector = inspector
    document.remarks = remarks or f"On Hold - Assigned to {inspector}"
    document.save()

    entry = record_tracking_entry(document, Action.HOLD.label)
    _log(document, Action.HOLD, session)
    return entry


@transaction.atomic
def delete_document(document, session, remarks=None):
    """
    Soft delete. The row and its audit trail stay in place.
    """
    _acquire(document, Action.DELETE)
    document.status = Status.DELETED
    document.save()

    entry = record_tracking_entry(document, Action.DELETE.label, remarks=remarks or "Deleted")
    _log(document, Action.DELETE, session)
    return entry


@transaction.atomic
def forward_to_division(document, session, division, forwarded_to_name='', remarks=None):
    _acquire(document, Action.FORWARD_TO_DIVISION)
    _require_destination(division, Division.routing_divisions() + (Division.ADMIN,))

    document.forwarded_by = session.forwarding_label
    document.forwarded_to = division
    document.forwarded_to_name = forwarded_to_name or division
    document.status = Status.OPEN
    document.remarks = remarks or f"Forwarded to {division}"
    document.save()

    entry = record_tracking_entry(document, Action.FORWARD_TO_DIVISION.label)
    _log(document, Action.FORWARD_TO_DIVISION, session)
    return entry


@transaction.atomic
def return_to_intake(document, session, remarks=None):
    _acquire(document, Action.RETURN_TO_INTAKE)

    document.forwarded_by = session.forwarding_label
    document.forwarded_to = Division.ADMIN
    document.forwarded_to_name = ''
    document.status = Status.RETURNED
    document.remarks = remarks or "Returned"
    document.save()

    ReturnRecord.objects.create(
        kind=ReturnRecord.Kind.RETURN_TO_AWD,
        document=document,
        reference_number=document.reference_number,
        subject=document.subject,
        forwarded_by=document.forwarded_by,
        forwarded_to=document.forwarded_to,
        remarks=document.remarks,
    )
    entry = record_tracking_entry(document, Action.RETURN_TO_INTAKE.label)
    _log(document, Action.RETURN_TO_INTAKE, session)
    return entry


@transaction.atomic
def endorse_to_secretary(document, session, remarks=None):
    """
    A division hands its document up to the Secretary. Status is unchanged.
    """
    _acquire(document, Action.ENDORSE_TO_SECRETARY)

    document.forwarded_by = document.forwarded_to
    document.forwarded_to = Division.SECRETARY
    document.forwarded_to_name = ''
    document.remarks = remarks or f"Endorsed by {document.forwarded_by}"
    document.save()

    entry = record_tracking_entry(document, Action.ENDORSE_TO_SECRETARY.label)
    _log(document, Action.ENDORSE_TO_SECRETARY, session)
    return entry


@transaction.atomic
def mark_received(document, session, received_by, remarks=None):
    _acquire(document, Action.MARK_RECEIVED)
    if not received_by:
        raise ValidationError("Enter the name of the person who received the document.")

    document.received_by = received_by
    document.remarks = remarks or f"Received by {received_by}"
    document.save()

    entry = record_tracking_entry(document, Action.MARK_RECEIVED.label)
    _log(document, Action.MARK_RECEIVED, session)
    return entry


@transaction.atomic
def return_closed(document, session, destination, remarks, forwarded_to_name=''):
    """
    Re-opens a closed document and sends it back to a division or the
    Secretary. Its manday records no longer count once it is re-opened.
    """
    _acquire(document, Action.RETURN_CLOSED)
    _require_destination(destination, Division.routing_divisions() + (Division.SECRETARY,))
    if not remarks:
        raise ValidationError("Remarks are required when returning a closed document.")

    document.forwarded_by = session.forwarding_label
    document.forwarded_to = destination
    document.forwarded_to_name = forwarded_to_name or destination
    document.status = Status.OPEN
    document.end_date = None
    document.remarks = remarks
    document.save()

    removed, _ = MandayRecord.objects.filter(reference_number=document.reference_number).delete()
    ReturnRecord.objects.create(
        kind=ReturnRecord.Kind.RETURN_TO_INSPECTOR,
        document=document,
        reference_number=document.reference_number,
        subject=document.subject,
        forwarded_by=document.forwarded_by,
        forwarded_to=document.forwarded_to,
        remarks=remarks,
    )
    entry = record_tracking_entry(document, Action.RETURN_CLOSED.label)
    _log(document, Action.RETURN_CLOSED, session)
    if removed:
        logger.info("%s: dropped %d manday record(s)", document.reference_number, removed)
    return entry


@transaction.atomic
def release_hold(document, session, remarks=None):
    _acquire(document, Action.RELEASE_HOLD)

    document.status = Status.OPEN
    document.remarks = remarks or "Released from hold"
    document.save()

    entry = record_tracking_entry(document, Action.RELEASE_HOLD.label)
    _log(document, Action.RELEASE_HOLD, session)
    return entry


@transaction.atomic
def reforward(document, session, destination, forwarded_to_name='', remarks=None):
    _acquire(document, Action.REFORWARD)
    _require_destination(destination, Division.routing_divisions() + (Division.SECRETARY,))

    document.forwarded_by = session.forwarding_label
    document.forwarded_to = destination
    document.forwarded_to_name = forwarded_to_name or destination
    document.status = Status.OPEN
    document.remarks = remarks or f"Forwarded to {destination}"
    document.save()

    entry = record_tracking_entry(document, Action.REFORWARD.label)
    _log(document, Action.REFORWARD, session)
    return entry


HANDLERS = {
    Action.ASSIGN_AND_CLOSE: assign_inspector_and_close,
    Action.HOLD: hold_document,
    Action.DELETE: delete_document,
    Action.FORWARD_TO_DIVISION: forward_to_division,
    Action.RETURN_TO_INTAKE: return_to_intake,
    Action.ENDORSE_TO_SECRETARY: endorse_to_secretary,
    Action.MARK_RECEIVED: mark_received,
    Action.RETURN_CLOSED: return_closed,
    Action.RELEASE_HOLD: release_hold,
    Action.REFORWARD: reforward,
}


def perform_action(document, action, session, **params):
    """
    Dispatches an Action to its transition function.
    """
    handler = HANDLERS[Action(action)]
    return handler(document, session, **params)


def bulk_return_closed(documents, session, destination, remarks):
    """
    Returns several closed documents one by one. Each document is its own
    transaction; a failure part way leaves earlier ones returned.
    """
    succeeded, failed = [], []
    for document in documents:
        try:
            return_closed(document, session, destination, remarks)
        except Exception:
            logger.exception("Bulk return failed for %s", document.reference_number)
            failed.append(document.reference_number)
        else:
            succeeded.append(document.reference_number)
    return BulkResult(succeeded, failed)


@transaction.atomic
def purge_documents(reference_numbers, session):
    """
    Hard delete of documents and every row that mentions their codes.
    """
    reference_numbers = list(reference_numbers)
    TrackingEntry.objects.filter(reference_number__in=reference_numbers).delete()
    MandayRecord.objects.filter(reference_number__in=reference_numbers).delete()
    ReturnRecord.objects.filter(reference_number__in=reference_numbers).delete()
    deleted, _ = Document.objects.filter(reference_number__in=reference_numbers).delete()
    logger.warning("Purged %d document(s) %s by %s", deleted, reference_numbers, session.forwarding_label)
    return deleted
