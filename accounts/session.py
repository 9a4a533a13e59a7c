from dataclasses import dataclass

from django.core.exceptions import PermissionDenied


@dataclass(frozen=True)
class AuthenticatedSession:
    """
    Identity of the signed-in account, passed explicitly into services
    instead of being read from the request.
    """
    id: int
    role: str
    name: str = ''

    @property
    def forwarding_label(self):
        return f"{self.name} ({self.role})"

    @classmethod
    def for_user(cls, user):
        return cls(id=user.pk, role=user.division, name=user.name or user.username)


def get_session(request):
    user = request.user
    if not user.is_authenticated:
        raise PermissionDenied("Not signed in.")
    return AuthenticatedSession.for_user(user)
