from django import template

from routing.deadlines import deadline_status
from routing.transitions import Action, actions_for

register = template.Library()


@register.filter
def reference_sequence(value):
    """
    Extracts the sequence number from 'AWD-YEAR-SEQ'.
    Example: 'AWD-2024-0012' -> '0012'
    """
    if not value or '-' not in value:
        return value
    return value.rsplit('-', 1)[-1]


@register.inclusion_tag('routing/partials/deadline_badge.html')
def deadline_badge(document):
    status = deadline_status(document.start_date, document.working_days, end_date=document.end_date)
    return {'label': status.label, 'urgency': status.urgency.value}


@register.simple_tag(takes_context=True)
def document_actions(context, document):
    """
    Actions the signed-in user can take on `document`, in display order.
    Usage: {% document_actions doc as actions %}
    """
    user = context['request'].user
    if not user.is_authenticated:
        return []
    available = actions_for(document, user.division)
    return [action for action in Action if action in available]
