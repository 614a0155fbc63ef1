"""Session and credential lifecycle.

Every operation is a transition over persisted ``AuthSession`` and
``VerificationCode`` rows. Tokens are derived artifacts: the refresh token
carries only ``sessionId`` and is checked against the session table, the
access token carries ``userId`` + ``sessionId`` and is trusted on signature
and expiry alone.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from sqlmodel import Session

from app.backend.core.config import Settings
from app.backend.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    TooManyRequestsError,
    UnauthorizedError,
)
from app.backend.core.security import ensure_aware, hash_password, now_utc, verify_password
from app.backend.core.tokens import TokenCodec, TokenKind
from app.backend.models.user import User
from app.backend.models.verification_code import VerificationCodeType
from app.backend.schemas.auth import LoginBody, RegisterBody
from app.backend.services.email_templates import (
    password_reset_link,
    password_reset_template,
    verify_email_link,
    verify_email_template,
)
from app.backend.services.session_store import SessionStore
from app.backend.services.user_store import UserStore
from app.backend.services.verification_codes import VerificationCodeIssuer

log = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=30)
SESSION_REFRESH_WINDOW = timedelta(hours=24)
EMAIL_VERIFICATION_TTL = timedelta(days=365)
PASSWORD_RESET_TTL = timedelta(hours=1)
PASSWORD_RESET_WINDOW = timedelta(minutes=5)
PASSWORD_RESET_MAX_IN_WINDOW = 2

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class RefreshOutcome:
    access_token: str
    # rotation이 일어난 경우에만 채워짐
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class RegisterOutcome:
    user: User
    tokens: IssuedTokens


class AuthService:
    def __init__(
        self,
        db: Session,
        *,
        settings: Settings,
        mailer,
        codec: Optional[TokenCodec] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.settings = settings
        self.mailer = mailer
        self.codec = codec or TokenCodec(settings)
        self.clock = clock
        self.users = UserStore(db)
        self.sessions = SessionStore(db)
        self.codes = VerificationCodeIssuer(db)

    # ---- helpers ----
    def _open_session(self, user: User, user_agent: Optional[str]) -> IssuedTokens:
        session = self.sessions.create(
            user_id=user.user_id,
            user_agent=user_agent,
            expires_at=self.clock() + SESSION_TTL,
        )
        return IssuedTokens(
            access_token=self.codec.sign(
                TokenKind.ACCESS, {"userId": user.user_id, "sessionId": session.session_id}
            ),
            refresh_token=self.codec.sign(TokenKind.REFRESH, {"sessionId": session.session_id}),
        )

    def _send_verification_email(self, user: User) -> None:
        code = self.codes.issue(
            user.user_id, VerificationCodeType.EMAIL_VERIFICATION, EMAIL_VERIFICATION_TTL, self.clock()
        )
        link = verify_email_link(self.settings.primary_origin, code.code_id)
        content = verify_email_template(link)
        try:
            result = self.mailer.send(to=user.email, subject=content.subject, html=content.html, text=content.text)
        except Exception:
            # 메일 실패는 가입을 막지 않는다 (코드 발급 실패는 전파)
            log.exception("verification email to user_id=%s could not be sent", user.user_id)
            return
        if not result.ok:
            log.warning("verification email to user_id=%s failed: %s", user.user_id, result.error)

    # ---- transitions ----
    def register(self, body: RegisterBody, user_agent: Optional[str]) -> RegisterOutcome:
        if self.users.find_by_email(body.email):
            raise ConflictError("Email already in use")

        user = self.users.create(
            email=body.email,
            password_hash=hash_password(body.password),
            name=body.name,
            telephone=body.telephone,
        )

        self._send_verification_email(user)
        return RegisterOutcome(user=user, tokens=self._open_session(user, user_agent))

    def login(self, body: LoginBody, user_agent: Optional[str]) -> IssuedTokens:
        user = self.users.find_by_email(body.email)
        if user is None or not verify_password(body.password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)
        return self._open_session(user, user_agent)

    def refresh(self, refresh_token: Optional[str]) -> RefreshOutcome:
        if not refresh_token:
            raise UnauthorizedError("Missing refresh token")

        result = self.codec.verify(TokenKind.REFRESH, refresh_token)
        if not result.ok:
            raise UnauthorizedError("Invalid refresh token")

        try:
            session_id = UUID(result.claims["sessionId"])
        except ValueError:
            raise UnauthorizedError("Invalid refresh token")

        now = self.clock()
        session = self.sessions.get(session_id)
        if session is None or ensure_aware(session.expires_at) <= now:
            raise UnauthorizedError("Session expired")

        new_refresh = None
        if ensure_aware(session.expires_at) - now <= SESSION_REFRESH_WINDOW:
            self.sessions.extend(session, now + SESSION_TTL)
            new_refresh = self.codec.sign(TokenKind.REFRESH, {"sessionId": session.session_id})

        access = self.codec.sign(
            TokenKind.ACCESS, {"userId": session.user_id, "sessionId": session.session_id}
        )
        return RefreshOutcome(access_token=access, refresh_token=new_refresh)

    def logout(self, access_token: Optional[str]) -> bool:
        """Best effort: returns whether a session row was removed."""
        if not access_token:
            return False
        result = self.codec.verify(TokenKind.ACCESS, access_token)
        if not result.ok:
            return False
        try:
            session_id = UUID(result.claims["sessionId"])
        except ValueError:
            return False
        return self.sessions.delete(session_id)

    def verify_email(self, code_id: str) -> User:
        rec = self.codes.find_valid(code_id, VerificationCodeType.EMAIL_VERIFICATION, self.clock())
        if rec is None:
            raise NotFoundError("Invalid or expired verification code")

        user = self.users.get(rec.user_id)
        if user is None:
            raise NotFoundError("Failed to verify email")
        user = self.users.update(user, verified=True)
        self.codes.delete(rec)
        return user

    def forgot_password(self, email: str) -> None:
        user = self.users.find_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        now = self.clock()
        recent = self.codes.count_issued_since(
            user.user_id, VerificationCodeType.PASSWORD_RESET, now - PASSWORD_RESET_WINDOW
        )
        if recent >= PASSWORD_RESET_MAX_IN_WINDOW:
            raise TooManyRequestsError("Too many requests, please try again later")

        code = self.codes.issue(user.user_id, VerificationCodeType.PASSWORD_RESET, PASSWORD_RESET_TTL, now)
        link = password_reset_link(self.settings.primary_origin, code.code_id, code.expires_at)
        content = password_reset_template(link)
        result = self.mailer.send(to=user.email, subject=content.subject, html=content.html, text=content.text)
        if not result.ok:
            log.error("password reset email to user_id=%s failed: %s", user.user_id, result.error)
            raise InternalError("Failed to send password reset email")

    def reset_password(self, code_id: str, new_password: str) -> User:
        rec = self.codes.find_valid(code_id, VerificationCodeType.PASSWORD_RESET, self.clock())
        if rec is None:
            raise NotFoundError("Invalid or expired verification code")

        user = self.users.get(rec.user_id)
        if user is None:
            raise InternalError("Failed to reset password")
        user = self.users.update(user, password_hash=hash_password(new_password))
        self.sessions.delete_for_user(user.user_id)
        self.codes.delete(rec)
        return user

