from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from functools import lru_cache
from typing import Optional

from app.backend.core.config import Settings, get_settings

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    id: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.id is not None


class SmtpMailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        s = self.settings
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((s.mail_from_name, s.mail_from))
        msg["To"] = to
        msg_id = make_msgid()
        msg["Message-ID"] = msg_id
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        try:
            # Add timeout to prevent indefinite hangs
            with smtplib.SMTP(s.smtp_server, s.smtp_port, timeout=30) as server:
                server.starttls()
                if s.smtp_user:
                    server.login(s.smtp_user, s.smtp_password)
                server.sendmail(s.mail_from, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            log.warning("SMTP send to %s failed: %s", to, exc)
            return SendResult(error=str(exc))
        return SendResult(id=msg_id)


class LogMailer:
    """SMTP 미설정(로컬 개발) 시 메일 내용을 로그로만 남긴다."""

    def send(self, *, to: str, subject: str, html: str, text: str) -> SendResult:
        log.info("mail (not sent) to=%s subject=%s\n%s", to, subject, text)
        return SendResult(id=make_msgid(domain="localhost"))


@lru_cache
def get_mailer():
    settings = get_settings()
    if settings.smtp_server:
        return SmtpMailer(settings)
    log.warning("SMTP_SERVER not set; outgoing mail is only logged")
    return LogMailer()
