from __future__ import annotations

import html
import logging
import re
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from config import Settings
from email_templates import NEWS_SUMMARY_EMAIL_TEMPLATE, WELCOME_EMAIL_TEMPLATE
from errors import MailDeliveryError

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to Signalist - your stock market toolkit is ready!"
NEWS_SUMMARY_SUBJECT = "Market News Summary Today - {date}"


def _render(template: str, **values: str) -> str:
    body = template
    for key, value in values.items():
        body = body.replace("{{%s}}" % key, value)
    return body


def _html_to_text(body: str) -> str:
    text = re.sub(r"<(br|/p|/li|/h\d)[^>]*>", "\n", body, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", "", text)
    text = html.unescape(text)
    return re.sub(r"\n\s*\n+", "\n\n", text).strip()


class MailTransport(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> None:
        ...


class SmtpTransport:
    """Sends one message per SMTP session over STARTTLS."""

    def __init__(self, host: str, port: int, user: str, password: str, sender: str, *, timeout: float = 30) -> None:
        self._host = host
        self._port = port
        self._user = user
        self._password = password
        self._sender = sender
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpTransport":
        return cls(
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_user,
            settings.smtp_password,
            settings.mail_from,
        )

    def send(self, to: str, subject: str, html_body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(_html_to_text(html_body))
        msg.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                server.starttls()
                if self._user:
                    server.login(self._user, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(to, str(exc)) from exc
        logger.info("Mail '%s' sent to %s", subject, to)


class Mailer:
    """Renders Signalist emails and hands them to a transport."""

    def __init__(self, transport: MailTransport) -> None:
        self._transport = transport

    def send_welcome_email(self, email: str, name: Optional[str], intro: str) -> None:
        body = _render(
            WELCOME_EMAIL_TEMPLATE,
            name=html.escape(name or "there"),
            intro=intro,
        )
        self._transport.send(email, WELCOME_SUBJECT, body)

    def send_news_summary_email(self, email: str, date: str, news_content: str) -> None:
        body = _render(
            NEWS_SUMMARY_EMAIL_TEMPLATE,
            date=html.escape(date),
            newsContent=news_content,
        )
        self._transport.send(email, NEWS_SUMMARY_SUBJECT.format(date=date), body)
