from django.contrib import messages
from django.contrib.auth.mixins import AccessMixin
from django.shortcuts import redirect

from .models import Division


class DivisionRequiredMixin(AccessMixin):
    """Verify that the current user belongs to one of `allowed_divisions`."""
    allowed_divisions = ()

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if request.user.division not in self.allowed_divisions:
            messages.error(request, "You do not have permission to access this page.")
            return redirect('dashboard')

        return super().dispatch(request, *args, **kwargs)


class AdminRequiredMixin(DivisionRequiredMixin):
    allowed_divisions = (Division.ADMIN,)


class SecretaryRequiredMixin(DivisionRequiredMixin):
    allowed_divisions = (Division.SECRETARY,)


class PortalRequiredMixin(DivisionRequiredMixin):
    allowed_divisions = Division.portal_divisions()
