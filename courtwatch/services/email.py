"""
Outbound mail for court alerts.

Every message is HTML with a plain-text part derived from it. Without
SMTP credentials (local development) the message is written to the log
instead of being sent.
"""

from __future__ import annotations

import logging
import re
from email.message import EmailMessage

import aiosmtplib
from bs4 import BeautifulSoup

from courtwatch import config

logger = logging.getLogger(__name__)


def html_to_text(html_body: str) -> str:
    text = BeautifulSoup(html_body, "html.parser").get_text("\n", strip=True)
    return re.sub(r"\n{3,}", "\n\n", text)


def build_message(to_email: str, subject: str, html_body: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = config.SMTP_FROM_EMAIL
    message["To"] = to_email
    message.set_content(html_to_text(html_body))
    message.add_alternative(html_body, subtype="html")
    return message


async def send_email(to_email: str, subject: str, html_body: str) -> None:
    """
    Deliver one alert.

    Transport errors are logged and re-raised; the notifier decides
    that a single failed recipient is not fatal.
    """
    if not config.smtp_enabled():
        logger.info(
            "📧 [DEV] Would send email to %s:\n  Subject: %s\n%s",
            to_email, subject, html_to_text(html_body),
        )
        return

    try:
        await aiosmtplib.send(
            build_message(to_email, subject, html_body),
            hostname=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME,
            password=config.SMTP_PASSWORD,
            start_tls=config.SMTP_USE_TLS,
        )
    except Exception:
        logger.exception("❌ SMTP delivery to %s failed", to_email)
        raise
    logger.info("📧 Email sent to %s", to_email)
