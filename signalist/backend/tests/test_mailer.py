from __future__ import annotations

import smtplib
from datetime import date
from unittest.mock import patch

import pytest

from conftest import RecordingTransport
from errors import MailDeliveryError
from mailer import Mailer, SmtpTransport
from utils import get_formatted_today_date


def test_formatted_date():
    assert get_formatted_today_date(date(2026, 10, 18)) == "Sunday, October 18, 2026"
    assert get_formatted_today_date(date(2026, 3, 1)) == "Sunday, March 1, 2026"


def test_news_summary_email_embeds_content_and_date():
    transport = RecordingTransport()
    Mailer(transport).send_news_summary_email("a@example.com", "Sunday, October 18, 2026", "<h3>Tech</h3>")
    (mail,) = transport.sent
    assert "<h3>Tech</h3>" in mail["html"]
    assert "Sunday, October 18, 2026" in mail["html"]
    assert "{{" not in mail["html"]


def test_welcome_email_escapes_name():
    transport = RecordingTransport()
    Mailer(transport).send_welcome_email("a@example.com", "<b>Eve</b>", "<p>Hi</p>")
    assert "&lt;b&gt;Eve&lt;/b&gt;" in transport.sent[0]["html"]


def test_smtp_transport_sends_multipart_message():
    transport = SmtpTransport("smtp.example.com", 587, "user", "pw", "Signalist <s@example.com>")
    with patch("mailer.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        transport.send("a@example.com", "Subject", "<p>Hello <b>there</b></p>")

    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user", "pw")
    msg = server.send_message.call_args.args[0]
    assert msg["To"] == "a@example.com"
    assert msg.get_body(preferencelist=("plain",)).get_content().strip() == "Hello there"


def test_smtp_errors_become_mail_delivery_errors():
    transport = SmtpTransport("smtp.example.com", 587, "", "", "s@example.com")
    with patch("mailer.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        with pytest.raises(MailDeliveryError) as info:
            transport.send("a@example.com", "Subject", "<p>x</p>")
    assert info.value.recipient == "a@example.com"
    server.login.assert_not_called()
