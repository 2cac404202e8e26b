"""Tests for the mail adapters and the mailer registry."""

import smtplib
from dataclasses import replace

import pytest

import clubsupply.mail.smtp_email as smtp_module
import clubsupply.settings as settings_module
from clubsupply.mail import get_mailer, reset_mailer
from clubsupply.mail.fake_email import FakeEmailAdapter
from clubsupply.mail.smtp_email import SMTPEmailAdapter


class TestFakeEmailAdapter:
    def setup_method(self):
        self.adapter = FakeEmailAdapter()

    def test_send_records_email(self):
        result = self.adapter.send(to="asha@example.org", subject="Hi", body="Hello!")
        assert result["status"] == "sent"
        assert result["message_id"] is not None
        assert self.adapter.last_to("asha@example.org")["body"] == "Hello!"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="SMTP error")
        result = self.adapter.send(to="asha@example.org", subject="Hi", body="Hello")
        assert result["status"] == "failed"
        assert result["error"] == "SMTP error"
        assert len(self.adapter.sent_emails) == 0

    def test_last_to_picks_latest(self):
        self.adapter.send(to="asha@example.org", subject="Hi", body="first")
        self.adapter.send(to="ben@example.org", subject="Hi", body="other")
        self.adapter.send(to="asha@example.org", subject="Hi", body="second")
        assert self.adapter.last_to("asha@example.org")["body"] == "second"
        assert self.adapter.last_to("nobody@example.org") is None

    def test_reset(self):
        self.adapter.send(to="a@b.com", subject="Hi", body="Hello")
        self.adapter.configure(should_succeed=False)
        self.adapter.reset()
        assert len(self.adapter.sent_emails) == 0
        assert self.adapter.should_succeed is True


class _RecordingSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        _RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(("login", username))

    def send_message(self, message):
        self.calls.append(("send", message["To"], message["Subject"]))


class TestSMTPEmailAdapter:
    def setup_method(self):
        _RecordingSMTP.instances = []

    def test_sends_through_relay(self, monkeypatch):
        monkeypatch.setattr(smtp_module.smtplib, "SMTP", _RecordingSMTP)
        adapter = SMTPEmailAdapter("mail.local", 2525, "desk@example.org", username="desk", password="pw")

        result = adapter.send(to="asha@example.org", subject="Code", body="123456")

        assert result["status"] == "sent"
        client = _RecordingSMTP.instances[0]
        assert (client.host, client.port) == ("mail.local", 2525)
        assert client.calls == ["starttls", ("login", "desk"), ("send", "asha@example.org", "Code")]

    def test_relay_failure_is_reported(self, monkeypatch):
        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, "busy")

        monkeypatch.setattr(smtp_module.smtplib, "SMTP", refuse)
        adapter = SMTPEmailAdapter("mail.local", 2525, "desk@example.org")

        result = adapter.send(to="asha@example.org", subject="Code", body="123456")

        assert result["status"] == "failed"
        assert result["message_id"] is None


class TestMailerRegistry:
    def test_defaults_to_fake(self):
        assert isinstance(get_mailer(), FakeEmailAdapter)
        assert get_mailer() is get_mailer()

    def test_smtp_from_settings(self, monkeypatch):
        monkeypatch.setattr(
            settings_module,
            "settings",
            replace(settings_module.settings, email_adapter="smtp", smtp_host="mail.local"),
        )
        reset_mailer()

        mailer = get_mailer()

        assert isinstance(mailer, SMTPEmailAdapter)
        assert mailer.host == "mail.local"

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setattr(settings_module, "settings", replace(settings_module.settings, email_adapter="pigeon"))
        reset_mailer()

        with pytest.raises(ValueError):
            get_mailer()
