from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError

from app.backend.core.config import Settings, get_settings

# python-jose 사용


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenError(str, Enum):
    INVALID = "invalid_token"
    EXPIRED = "expired_token"


@dataclass(frozen=True)
class TokenResult:
    """Outcome of a verification; exactly one of claims/error is set."""

    claims: Optional[Dict[str, Any]] = None
    error: Optional[TokenError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.claims is not None


# 토큰 종류별로 서명에 남길 클레임
_CLAIMS = {
    TokenKind.ACCESS: ("userId", "sessionId"),
    TokenKind.REFRESH: ("sessionId",),
}


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenCodec:
    """Signs and verifies access/refresh JWTs with independent secrets."""

    def __init__(self, settings: Settings):
        self._alg = settings.jwt_algorithm
        self._audience = settings.jwt_audience
        self._secrets = {
            TokenKind.ACCESS: settings.jwt_secret,
            TokenKind.REFRESH: settings.jwt_refresh_secret,
        }
        self._ttls = {
            TokenKind.ACCESS: timedelta(minutes=settings.access_token_expire_minutes),
            TokenKind.REFRESH: timedelta(days=settings.refresh_token_expire_days),
        }

    def ttl(self, kind: TokenKind) -> timedelta:
        return self._ttls[kind]

    def sign(self, kind: TokenKind, claims: Dict[str, Any]) -> str:
        payload = {key: str(claims[key]) for key in _CLAIMS[kind]}
        now = _utcnow()
        payload["aud"] = self._audience
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + self._ttls[kind]).timestamp())
        return jwt.encode(payload, self._secrets[kind], algorithm=self._alg)

    def verify(self, kind: TokenKind, token: str, secret: Optional[str] = None) -> TokenResult:
        if not token:
            return TokenResult(error=TokenError.INVALID)
        try:
            payload = jwt.decode(
                token,
                secret or self._secrets[kind],
                algorithms=[self._alg],
                audience=self._audience,
            )
        except ExpiredSignatureError:
            return TokenResult(error=TokenError.EXPIRED)
        except (JOSEError, ValueError, TypeError):
            return TokenResult(error=TokenError.INVALID)

        # jose는 aud 클레임이 아예 없으면 통과시킨다
        if payload.get("aud") != self._audience:
            return TokenResult(error=TokenError.INVALID)
        if any(not payload.get(key) for key in _CLAIMS[kind]):
            return TokenResult(error=TokenError.INVALID)
        return TokenResult(claims=payload)


def get_token_codec() -> TokenCodec:
    return TokenCodec(get_settings())
