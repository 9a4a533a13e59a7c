import logging

from django.contrib.auth.signals import user_logged_in, user_logged_out, user_login_failed
from django.dispatch import receiver

logger = logging.getLogger(__name__)


def get_client_ip(request):
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0]
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip


@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    logger.info("Login: %s (%s) from %s", user.email, user.division, get_client_ip(request))


@receiver(user_logged_out)
def log_user_logout(sender, request, user, **kwargs):
    if user:
        logger.info("Logout: %s (%s)", user.email, user.division)


@receiver(user_login_failed)
def log_login_failure(sender, credentials, request=None, **kwargs):
    ip = get_client_ip(request) if request is not None else None
    logger.warning("Failed login for %s from %s", credentials.get('username'), ip)
