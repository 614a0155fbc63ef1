from __future__ import annotations

import os
import re
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# settings/engine은 import 시점에 환경변수를 읽는다
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["COOKIE_SECURE"] = "false"
os.environ["SMTP_SERVER"] = ""
os.environ["APP_ORIGIN"] = "http://localhost:5173"
os.environ["AUTH_STRICT_SESSION_CHECK"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from app.backend.core.config import get_settings  # noqa: E402
from app.backend.core.security import now_utc  # noqa: E402
from app.backend.main import app  # noqa: E402
from app.backend.services.auth_service import AuthService  # noqa: E402
from app.backend.services.mailer import SendResult, get_mailer  # noqa: E402
from app.db import base as _models  # noqa: E402,F401
from app.db.session import get_session  # noqa: E402

TEST_ENGINE = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

VERIFY_LINK_RE = re.compile(r"/email/verify/([A-Za-z0-9_-]+)")
RESET_LINK_RE = re.compile(r"/password/reset\?code=([A-Za-z0-9_-]+)&exp=(\d+)")


class RecordingMailer:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False
        self.raise_on_send = False

    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        if self.raise_on_send:
            raise ConnectionError("smtp unreachable")
        if self.fail:
            return SendResult(error="smtp rejected message")
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})
        return SendResult(id=f"<msg-{len(self.sent)}@test>")

    def last_verify_code(self) -> str:
        for msg in reversed(self.sent):
            m = VERIFY_LINK_RE.search(msg["text"])
            if m:
                return m.group(1)
        raise AssertionError("no verification email sent")

    def last_reset_code(self) -> str:
        for msg in reversed(self.sent):
            m = RESET_LINK_RE.search(msg["text"])
            if m:
                return m.group(1)
        raise AssertionError("no password reset email sent")


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self.now = start or now_utc()

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_engine():
    SQLModel.metadata.drop_all(TEST_ENGINE)
    SQLModel.metadata.create_all(TEST_ENGINE)
    yield TEST_ENGINE
    SQLModel.metadata.drop_all(TEST_ENGINE)


@pytest.fixture
def db(db_engine):
    with Session(db_engine) as s:
        yield s


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def service(db, mailer, clock, settings):
    return AuthService(db, settings=settings, mailer=mailer, clock=clock)


@pytest.fixture
def client(db_engine, mailer):
    def _get_session():
        with Session(db_engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(client):
    """Extra clients share the overrides; each keeps its own cookie jar (one per device)."""
    opened = []

    def _make(user_agent: str = "testclient") -> TestClient:
        c = TestClient(app, headers={"user-agent": user_agent})
        opened.append(c)
        return c

    yield _make
    for c in opened:
        c.close()


REGISTER_BODY = {
    "email": "a@x.com",
    "password": "Secret1",
    "confirmPassword": "Secret1",
    "name": "Amina",
    "telephone": "0551234567",
}


@pytest.fixture
def registered(client):
    r = client.post("/auth/register", json=REGISTER_BODY)
    assert r.status_code == 201, r.text
    return r.json()
