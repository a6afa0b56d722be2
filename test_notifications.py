import smtplib

import app.notification.service as _notifications
from app.core import settings

# the autouse email capture replaces the module attribute, not this reference
from app.notification.service import send_email


class FakeSMTP:
    opened = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.sent = []
        self.closed = False
        FakeSMTP.opened.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        if password == "wrong":
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")

    def sendmail(self, sender, recipient, body):
        self.sent.append(recipient)


def use_fake_smtp(monkeypatch, password):
    FakeSMTP.opened = []
    monkeypatch.setattr(settings, "SMTP_SERVER", "smtp.example.com")
    monkeypatch.setattr(settings, "SENDER_PASSWORD", password)
    monkeypatch.setattr(_notifications.smtplib, "SMTP", FakeSMTP)


def test_email_is_sent_and_connection_closed(monkeypatch):
    use_fake_smtp(monkeypatch, "right")

    assert send_email("fan@example.com", "Receipt", "<p>Thanks</p>") is True

    [connection] = FakeSMTP.opened
    assert connection.sent == ["fan@example.com"]
    assert connection.closed


def test_smtp_failure_is_logged_and_connection_closed(monkeypatch):
    use_fake_smtp(monkeypatch, "wrong")

    assert send_email("fan@example.com", "Receipt", "<p>Thanks</p>") is False

    [connection] = FakeSMTP.opened
    assert connection.sent == []
    assert connection.closed


def test_unconfigured_smtp_drops_the_email(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_SERVER", None)

    assert send_email("fan@example.com", "Receipt", "<p>Thanks</p>") is False
