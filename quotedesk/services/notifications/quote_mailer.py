# quotedesk/services/notifications/quote_mailer.py

import smtplib
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from quotedesk.core import config
from quotedesk.utils.logger import get_logger

logger = get_logger(__name__)

NO_NOTES_PLACEHOLDER = "(No notes provided)"

TEMPLATE_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_admin_notification(name: str, email: str, service: str, notes: str = "") -> tuple[str, str, str]:
    """
    Build the notification for a new quote request.

    Returns (subject, html_body, plain_body). The HTML template autoescapes
    every value; the plain-text template does not.
    """
    notes = notes or NO_NOTES_PLACEHOLDER
    subject = f"New Quote Request from {name}"
    context = {"name": name, "email": email, "service": service}

    plain_body = _env.get_template("quote_notification.txt").render(notes=notes, **context)
    html_body = _env.get_template("quote_notification.html").render(
        notes_lines=notes.split("\n"),
        **context,
    )

    return subject, html_body, plain_body


def send_email(to_email: str, subject: str, body: str, subtype: str = "plain") -> bool:
    """
    Send one message. Transport errors are logged and reported as False.
    Without SMTP_HOST the message is only logged (dev mode) and counts as sent.
    """
    if not config.SMTP_HOST:
        logger.info(
            "SMTP_HOST not configured, email logged instead of sent",
            extra={"to": to_email, "subject": subject, "subtype": subtype},
        )
        logger.debug(body)
        return True

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = config.SMTP_FROM_EMAIL or config.SMTP_USER
    msg["To"] = to_email
    msg.set_content(body, subtype=subtype)

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=config.SMTP_TIMEOUT_SECONDS) as server:
            if config.SMTP_USE_TLS:
                server.starttls()
            if config.SMTP_USER and config.SMTP_PASSWORD:
                server.login(config.SMTP_USER, config.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception(
            "Failed to send email",
            extra={"to": to_email, "subject": subject, "subtype": subtype},
        )
        return False

    logger.info("Email sent", extra={"to": to_email, "subtype": subtype})
    return True


def send_admin_notification(name: str, email: str, service: str, notes: str = "") -> bool:
    """
    Notify the site administrator about a new quote request.

    The HTML version and the plain-text version go out as two separate
    messages; both are attempted and the result is True only if both succeed.
    """
    recipient = config.QUOTE_NOTIFICATION_EMAIL
    subject, html_body, plain_body = render_admin_notification(name, email, service, notes)

    html_ok = send_email(recipient, subject, html_body, subtype="html")
    plain_ok = send_email(recipient, subject, plain_body, subtype="plain")

    return html_ok and plain_ok
