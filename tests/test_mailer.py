import smtplib

import pytest

from app.backend.services import mailer as mailer_module
from app.backend.services.mailer import LogMailer, SmtpMailer


class _FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def sendmail(self, sender, recipients, body):
        self.calls.append(("sendmail", sender, tuple(recipients)))


@pytest.fixture
def smtp_settings(settings):
    return settings.model_copy(
        update={"smtp_server": "smtp.example.com", "smtp_user": "mailer", "smtp_password": "pw"}
    )


def test_smtp_mailer_returns_message_id(monkeypatch, smtp_settings):
    _FakeSMTP.instances.clear()
    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _FakeSMTP)

    result = SmtpMailer(smtp_settings).send(to="a@x.com", subject="Hi", html="<p>hi</p>", text="hi")

    assert result.ok
    assert result.id.startswith("<")
    server = _FakeSMTP.instances[0]
    assert (server.host, server.port, server.timeout) == ("smtp.example.com", 587, 30)
    assert server.calls == ["starttls", ("login", "mailer"), ("sendmail", smtp_settings.mail_from, ("a@x.com",))]


def test_smtp_mailer_reports_failure_without_raising(monkeypatch, smtp_settings):
    def _refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "busy")

    monkeypatch.setattr(mailer_module.smtplib, "SMTP", _refuse)

    result = SmtpMailer(smtp_settings).send(to="a@x.com", subject="Hi", html="", text="")

    assert not result.ok
    assert "busy" in result.error


def test_log_mailer_always_succeeds():
    assert LogMailer().send(to="a@x.com", subject="Hi", html="", text="hello").ok
