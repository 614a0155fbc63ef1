from datetime import datetime, timezone
import secrets

from passlib.context import CryptContext

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_ctx.verify(plain, hashed)
    except ValueError:
        # 알 수 없는 해시 포맷
        return False


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime. SQLite hands back naive values."""
    if dt is None:
        return None
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def new_code_id() -> str:
    # 22자 url-safe, 검증 스키마의 25자 상한 이내
    return secrets.token_urlsafe(16)
