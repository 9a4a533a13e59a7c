from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect

from accounts.models import Division

DASHBOARDS = {
    Division.ADMIN: 'mis:admin_dashboard',
    Division.SECRETARY: 'mis:secretary_dashboard',
}


def landing(request):
    """
    Public entry point: signed-in users go to their dashboard, others to login.
    """
    if request.user.is_authenticated:
        return redirect('dashboard')
    return redirect('login')


@login_required
def dashboard(request):
    """
    Sends the user to the dashboard of their division.
    """
    target = DASHBOARDS.get(request.user.division)
    if target is None:
        logout(request)
        messages.error(request, "Your account does not have access to this portal.")
        return redirect('login')
    return redirect(target)
