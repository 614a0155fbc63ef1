from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from app.backend.core.tokens import TokenCodec, TokenError, TokenKind


@pytest.fixture
def codec(settings):
    return TokenCodec(settings)


def _raw(settings, payload, secret=None):
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_access_token_round_trip_carries_user_and_session(codec, settings):
    user_id, session_id = uuid4(), uuid4()

    result = codec.verify(TokenKind.ACCESS, codec.sign(TokenKind.ACCESS, {"userId": user_id, "sessionId": session_id}))

    assert result.ok
    assert result.claims["userId"] == str(user_id)
    assert result.claims["sessionId"] == str(session_id)
    assert result.claims["aud"] == settings.jwt_audience
    assert result.claims["exp"] - result.claims["iat"] == 15 * 60


def test_refresh_token_carries_only_session_id(codec):
    token = codec.sign(TokenKind.REFRESH, {"sessionId": uuid4(), "userId": uuid4()})

    result = codec.verify(TokenKind.REFRESH, token)

    assert result.ok
    assert "userId" not in result.claims
    assert result.claims["exp"] - result.claims["iat"] == 30 * 24 * 60 * 60


def test_kinds_use_independent_secrets(codec):
    access = codec.sign(TokenKind.ACCESS, {"userId": uuid4(), "sessionId": uuid4()})
    refresh = codec.sign(TokenKind.REFRESH, {"sessionId": uuid4()})

    assert codec.verify(TokenKind.REFRESH, access).error is TokenError.INVALID
    assert codec.verify(TokenKind.ACCESS, refresh).error is TokenError.INVALID


def test_expired_token_is_tagged_expired(codec, settings):
    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    token = _raw(
        settings,
        {"userId": "u", "sessionId": "s", "aud": settings.jwt_audience, "exp": int(past.timestamp())},
    )

    result = codec.verify(TokenKind.ACCESS, token)

    assert not result.ok
    assert result.error is TokenError.EXPIRED


@pytest.mark.parametrize(
    "payload",
    [
        {"userId": "u", "sessionId": "s", "aud": "admin"},
        {"userId": "u", "sessionId": "s"},
        {"userId": "u", "aud": "user"},
    ],
)
def test_wrong_audience_or_missing_claims_is_invalid(codec, settings, payload):
    payload = dict(payload, exp=int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()))

    assert codec.verify(TokenKind.ACCESS, _raw(settings, payload)).error is TokenError.INVALID


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_input_never_raises(codec, token):
    assert codec.verify(TokenKind.ACCESS, token).error is TokenError.INVALID


def test_secret_override_is_used_for_verification(codec, settings):
    payload = {
        "sessionId": "s",
        "aud": settings.jwt_audience,
        "exp": int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp()),
    }
    token = _raw(settings, payload, secret="rotated-secret")

    assert codec.verify(TokenKind.REFRESH, token).error is TokenError.INVALID
    assert codec.verify(TokenKind.REFRESH, token, secret="rotated-secret").ok
