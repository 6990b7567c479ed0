from __future__ import annotations

import smtplib
from collections.abc import Sequence
from email.message import EmailMessage

from gymbook.core.logging import get_logger
from gymbook.core.settings import settings


def build_message(
    subject: str, to: Sequence[str], html: str, text: str | None = None
) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"{settings.MAIL_FROM_NAME} <{settings.MAIL_FROM}>"
    msg["To"] = ", ".join(to)
    # parte texto sempre presente para clientes sem HTML
    msg.set_content(text or "This report is best viewed in an HTML-capable mail client.")
    msg.add_alternative(html, subtype="html")
    return msg


def send_email(
    subject: str, to: Sequence[str], html: str, text: str | None = None
) -> None:
    """Deliver one HTML message over SMTP. Transport errors propagate."""
    msg = build_message(subject, to, html, text)
    with smtplib.SMTP(settings.MAIL_HOST, settings.MAIL_PORT) as smtp:
        if settings.MAIL_TLS:
            smtp.starttls()
        if settings.MAIL_USER:
            smtp.login(settings.MAIL_USER, settings.MAIL_PASS)
        smtp.send_message(msg)
    get_logger().info("mail.sent", subject=subject, recipients=len(to))
