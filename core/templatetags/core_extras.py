from django import template
from django.urls import reverse

from accounts.models import Division

register = template.Library()

PORTAL_MENUS = {
    Division.ADMIN: [
        ('Dashboard', 'mis:admin_dashboard'),
        ('Assign Tracking Number', 'documents:intake'),
        ('Pending', 'documents:admin_pending'),
        ('Ongoing', 'documents:admin_ongoing'),
        ('Sent', 'documents:admin_sent'),
        ('On Hold', 'documents:admin_hold'),
        ('Closed', 'documents:admin_closed'),
        ('Returned', 'documents:admin_returned'),
        ('Mandays', 'mis:mandays'),
        ('Document Report', 'mis:document_report'),
        ('Accounts', 'account_list'),
        ('Purge', 'routing:purge'),
    ],
    Division.SECRETARY: [
        ('Dashboard', 'mis:secretary_dashboard'),
        ('Pending', 'documents:secretary_pending'),
        ('With Divisions', 'documents:secretary_division'),
        ('Ongoing', 'documents:secretary_ongoing'),
        ('On Hold', 'documents:secretary_hold'),
        ('Sent', 'documents:secretary_sent'),
    ],
}


@register.simple_tag
def portal_menu(user):
    """
    Sidebar links for the signed-in user's portal as (label, url) pairs.
    """
    if not user.is_authenticated:
        return []
    return [(label, reverse(name)) for label, name in PORTAL_MENUS.get(user.division, [])]
