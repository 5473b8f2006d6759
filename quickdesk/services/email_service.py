import logging
import smtplib
from email.message import EmailMessage

from quickdesk.core.config import settings

logger = logging.getLogger(__name__)


def send_email_notification(to_address: str, subject: str, body: str) -> bool:
    """Best-effort outbound email. Returns True when the SMTP server accepted it."""
    if not settings.SMTP_HOST:
        logger.info("SMTP_HOST not configured; skipping email '%s' to %s", subject, to_address)
        return False
    if not to_address:
        logger.warning("No recipient address for email '%s'", subject)
        return False

    msg = EmailMessage()
    msg["From"] = settings.MAIL_FROM
    msg["To"] = to_address
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT_SECONDS) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Email '%s' to %s failed. error=%s", subject, to_address, str(e))
        return False

    logger.info("Email '%s' sent to %s", subject, to_address)
    return True
