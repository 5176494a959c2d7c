"""Tasks for the accounts app."""

from urllib.parse import urlencode

import structlog
from celery import shared_task
from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone
from ninja_jwt.token_blacklist.models import OutstandingToken

from accounts.models import VerificationToken
from common.tasks import send_email

logger = structlog.get_logger(__name__)


def build_verification_link(email: str, token: str) -> str:
    """The link the user clicks to confirm an address. It points straight at the API."""
    query = urlencode({"token": token, "email": email})
    return f"{settings.API_BASE_URL}/api/account/verify-email?{query}"


@shared_task
def send_verification_email(email: str, token: str) -> None:
    """Send a verification email."""
    logger.info("verification_email_sending", email=email)
    context = {
        "verification_link": build_verification_link(email, token),
        "site_name": settings.SITE_NAME,
        "lifetime_hours": int(settings.VERIFICATION_TOKEN_LIFETIME.total_seconds() // 3600),
    }
    subject = render_to_string("accounts/emails/email_verification_subject.txt", context).strip()
    body = render_to_string("accounts/emails/email_verification_body.txt", context)
    html_body = render_to_string("accounts/emails/email_verification_body.html", context)
    send_email(to=email, subject=subject, body=body, html_body=html_body)
    logger.info("verification_email_sent", email=email)


@shared_task
def flush_expired_tokens() -> None:
    """Delete expired verification tokens and outstanding JWTs.

    This task is designed to be run periodically to clean up expired tokens.
    """
    logger.info("token_cleanup_started")
    now = timezone.now()
    verification_deleted, _ = VerificationToken.objects.filter(expires_at__lte=now).delete()
    jwt_deleted, _ = OutstandingToken.objects.filter(expires_at__lte=now).delete()
    logger.info(
        "token_cleanup_completed",
        verification_tokens_deleted=verification_deleted,
        jwt_tokens_deleted=jwt_deleted,
    )
