import logging

from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.views import redirect_to_login
from django.shortcuts import redirect

from .models import Division

logger = logging.getLogger(__name__)

# URL prefix -> division allowed behind it.
PROTECTED_PREFIXES = (
    ('/admin/', Division.ADMIN),
    ('/secretary/', Division.SECRETARY),
)


class DivisionAccessMiddleware:
    """
    Keeps each portal to its own division. Anonymous users are sent to the
    login page; signed-in users from another division are signed out first.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        required = self.required_division(request.path)
        if required is not None:
            user = request.user
            if not user.is_authenticated:
                return redirect_to_login(request.get_full_path())
            if user.division != required:
                logger.warning("%s (%s) tried to open %s", user.email, user.division, request.path)
                logout(request)
                messages.error(request, "Please sign in with an account for that portal.")
                return redirect('login')
        return self.get_response(request)

    @staticmethod
    def required_division(path):
        for prefix, division in PROTECTED_PREFIXES:
            if path.startswith(prefix):
                return division
        return None
