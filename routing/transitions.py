from django.core.exceptions import ValidationError
from django.db import models

from accounts.models import Division
from documents.models import Document


class Action(models.TextChoices):
    ASSIGN_AND_CLOSE = 'assign_close', 'Assign Inspector & Close'
    HOLD = 'hold', 'Hold'
    DELETE = 'delete', 'Delete'
    FORWARD_TO_DIVISION = 'forward', 'Forward to Division'
    RETURN_TO_INTAKE = 'return_intake', 'Return to Intake'
    ENDORSE_TO_SECRETARY = 'endorse', 'Endorse to Secretary'
    MARK_RECEIVED = 'receive', 'Mark Received'
    RETURN_CLOSED = 'return_closed', 'Return with Remarks'
    RELEASE_HOLD = 'release', 'Return to Open'
    REFORWARD = 'reforward', 'Re-forward'


class TransitionNotAllowed(ValidationError):
    pass


Status = Document.Status

ANY_HOLDER = '*'
DIVISION_HOLDER = 'division'

# (status, holder) -> permitted actions. Holder is the intake role, the
# secretary role, any named division, or any holder at all.
ROUTING_TABLE = {
    (Status.OPEN, Division.ADMIN): frozenset({
        Action.ASSIGN_AND_CLOSE, Action.HOLD, Action.DELETE,
    }),
    (Status.OPEN, Division.SECRETARY): frozenset({
        Action.FORWARD_TO_DIVISION, Action.RETURN_TO_INTAKE, Action.DELETE,
    }),
    (Status.OPEN, DIVISION_HOLDER): frozenset({
        Action.ENDORSE_TO_SECRETARY, Action.DELETE,
    }),
    (Status.CLOSED, ANY_HOLDER): frozenset({
        Action.MARK_RECEIVED, Action.RETURN_CLOSED,
    }),
    (Status.ON_HOLD, ANY_HOLDER): frozenset({
        Action.RELEASE_HOLD, Action.DELETE,
    }),
    (Status.RETURNED, ANY_HOLDER): frozenset({
        Action.REFORWARD,
    }),
}


def holder_key(forwarded_to):
    if forwarded_to in Division.routing_divisions():
        return DIVISION_HOLDER
    return forwarded_to


def allowed_actions(status, forwarded_to):
    """
    Returns the frozenset of actions reachable from (status, forwarded_to).
    Unknown combinations (including Deleted) allow nothing.
    """
    exact = ROUTING_TABLE.get((status, holder_key(forwarded_to)))
    if exact is not None:
        return exact
    return ROUTING_TABLE.get((status, ANY_HOLDER), frozenset())


def is_allowed(document, action):
    return action in allowed_actions(document.status, document.forwarded_to)


def require_allowed(document, action):
    if not is_allowed(document, action):
        raise TransitionNotAllowed(
            f"Cannot {Action(action).label.lower()} {document.reference_number} "
            f"while it is {document.status} at {document.forwarded_to or 'no one'}."
        )


# Which portal role may trigger each action.
PERFORMERS = {
    Action.ASSIGN_AND_CLOSE: {Division.ADMIN},
    Action.HOLD: {Division.ADMIN},
    Action.DELETE: {Division.ADMIN, Division.SECRETARY},
    Action.FORWARD_TO_DIVISION: {Division.SECRETARY},
    Action.RETURN_TO_INTAKE: {Division.SECRETARY},
    Action.ENDORSE_TO_SECRETARY: {Division.SECRETARY},
    Action.MARK_RECEIVED: {Division.ADMIN},
    Action.RETURN_CLOSED: {Division.ADMIN},
    Action.RELEASE_HOLD: {Division.ADMIN, Division.SECRETARY},
    Action.REFORWARD: {Division.ADMIN},
}


def actions_for(document, role):
    """
    Actions a given role can take on the document right now; drives which
    buttons a page shows.
    """
    return frozenset(
        action for action in allowed_actions(document.status, document.forwarded_to)
        if role in PERFORMERS[action]
    )
