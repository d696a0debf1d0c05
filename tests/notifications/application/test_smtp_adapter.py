"""Tests for the SMTP adapter with the relay replaced by a stub."""

import smtplib

import pytest
from notifications.channel.smtp_email import SmtpEmailAdapter


class RecordingSMTP:
    instances: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.logged_in = None
        self.messages = []
        RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, message):
        self.messages.append(message)


@pytest.fixture(autouse=True)
def stub_smtp(monkeypatch):
    RecordingSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", RecordingSMTP)


def test_sends_message():
    adapter = SmtpEmailAdapter(host="relay.local", port=2525, username="bot", password="pw", sender="shop@example.com")
    result = adapter.send("asha@example.com", "Hello", "Body")

    assert result["status"] == "sent"
    smtp = RecordingSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("relay.local", 2525)
    assert smtp.logged_in == ("bot", "pw")
    message = smtp.messages[0]
    assert message["To"] == "asha@example.com"
    assert message["From"] == "shop@example.com"
    assert message["Message-ID"] == result["message_id"]


def test_relay_failure_reports_failed(monkeypatch):
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no relay")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    result = SmtpEmailAdapter(host="relay.local").send("a@example.com", "s", "b")
    assert result["status"] == "failed"
    assert "no relay" in result["error"]


def test_relay_settings_come_from_configuration(monkeypatch):
    from shared.config import reset_settings

    monkeypatch.setenv("SMTP_HOST", "mail.example.com")
    monkeypatch.setenv("SMTP_PORT", "465")
    monkeypatch.setenv("SMTP_USER", "mailer")
    monkeypatch.setenv("SMTP_PASSWORD", "secret")
    monkeypatch.setenv("EMAIL_FROM", "orders@example.com")
    reset_settings()

    result = SmtpEmailAdapter().send("asha@example.com", "Hello", "Body")

    assert result["status"] == "sent"
    smtp = RecordingSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("mail.example.com", 465)
    assert smtp.logged_in == ("mailer", "secret")
    assert smtp.messages[0]["From"] == "orders@example.com"


def test_sender_falls_back_to_relay_user(monkeypatch):
    from shared.config import reset_settings

    monkeypatch.delenv("EMAIL_FROM", raising=False)
    monkeypatch.setenv("SMTP_USER", "mailer@example.com")
    reset_settings()

    assert SmtpEmailAdapter().sender == "mailer@example.com"
