from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

from socialpod.config import settings

logger = logging.getLogger(__name__)


def is_email_enabled() -> bool:
    """Return True when notification mail is switched on and a relay is configured."""
    return bool(
        settings.EMAIL_NOTIFICATIONS_ENABLED
        and settings.SMTP_SERVER
        and settings.EMAIL_FROM
    )


def build_message(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = settings.EMAIL_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid(domain=settings.pod_host.split(":")[0])
    msg.set_content(body_text)
    if body_html:
        msg.add_alternative(body_html, subtype="html")
    return msg


def _open_connection() -> smtplib.SMTP:
    if settings.SMTP_USE_SSL:
        return smtplib.SMTP_SSL(
            settings.SMTP_SERVER,
            settings.SMTP_PORT,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    server = smtplib.SMTP(
        settings.SMTP_SERVER,
        settings.SMTP_PORT,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )
    if settings.SMTP_USE_TLS:
        server.starttls()
    return server


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> bool:
    """
    Deliver one message through the configured SMTP relay.

    Returns True on success. Failures are logged and False is returned.
    """
    if not is_email_enabled():
        return False

    msg = build_message(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
        body_html=body_html,
    )

    try:
        with _open_connection() as server:
            if settings.EMAIL_PASSWORD:
                server.login(settings.SMTP_USERNAME or settings.EMAIL_FROM, settings.EMAIL_PASSWORD)
            server.send_message(msg)
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email send failed for '%s': %s", to_email, exc)
        return False
