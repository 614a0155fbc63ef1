from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.backend.core.config import Settings, get_settings
from app.backend.core.cookies import ACCESS_COOKIE_NAME
from app.backend.core.errors import UnauthorizedError
from app.backend.core.security import ensure_aware, now_utc
from app.backend.core.tokens import TokenCodec, TokenError, TokenKind, get_token_codec
from app.backend.services.auth_service import AuthService
from app.backend.services.mailer import get_mailer
from app.backend.services.session_store import SessionStore
from app.db.session import get_session

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    user_id: UUID
    session_id: UUID


def get_auth_service(
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    mailer=Depends(get_mailer),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(db, settings=settings, mailer=mailer, codec=codec)


def _extract_jwt(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds and creds.scheme.lower() == "bearer":
        return creds.credentials
    return request.cookies.get(ACCESS_COOKIE_NAME)


def get_current_auth(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthContext:
    """
    Access token 검증 (기본은 stateless: 서명 + 만료만 확인).
    AUTH_STRICT_SESSION_CHECK=true이면 세션 행의 존재/만료도 확인한다.
    """
    token = _extract_jwt(request, creds)
    if not token:
        raise UnauthorizedError("Not authorized")

    result = codec.verify(TokenKind.ACCESS, token)
    if result.error is TokenError.EXPIRED:
        raise UnauthorizedError("Access token expired", error_code="InvalidAccessToken")
    if not result.ok:
        raise UnauthorizedError("Invalid access token", error_code="InvalidAccessToken")

    try:
        ctx = AuthContext(
            user_id=UUID(result.claims["userId"]),
            session_id=UUID(result.claims["sessionId"]),
        )
    except ValueError:
        raise UnauthorizedError("Invalid access token", error_code="InvalidAccessToken")

    if settings.strict_session_check:
        session = SessionStore(db).get(ctx.session_id)
        if session is None or ensure_aware(session.expires_at) <= now_utc():
            raise UnauthorizedError("Session expired", error_code="InvalidAccessToken")
    return ctx
