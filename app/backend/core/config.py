# app/backend/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

_ALLOWED_ENVS = {"dev", "prod", "test"}


class Settings(BaseSettings):
    env: str = Field("dev", alias="ENV")
    app_name: str = Field("Marketplace Backend", alias="APP_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # DB
    database_url: str = Field("", alias="DATABASE_URL")
    database_driver: str = Field("psycopg2", alias="DATABASE_DRIVER")
    db_sslmode: str = Field("", alias="DB_SSLMODE")

    # JWT
    jwt_secret: str = Field("dev-access-secret-change-me", alias="JWT_SECRET")
    jwt_refresh_secret: str = Field("dev-refresh-secret-change-me", alias="JWT_REFRESH_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_audience: str = Field("user", alias="JWT_AUDIENCE")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_days: int = Field(30, alias="REFRESH_TOKEN_EXPIRE_DAYS")

    # 쿠키 (http 개발환경에서는 COOKIE_SECURE=false)
    cookie_secure: bool = Field(True, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("strict", alias="COOKIE_SAMESITE")
    cookie_domain: Optional[str] = Field(None, alias="COOKIE_DOMAIN")

    # access token 검증 시 세션 테이블까지 확인할지 여부
    strict_session_check: bool = Field(False, alias="AUTH_STRICT_SESSION_CHECK")

    # 링크/CORS
    app_origin: str = Field("http://localhost:5173", alias="APP_ORIGIN")

    # Mail
    smtp_server: str = Field("", alias="SMTP_SERVER")
    smtp_port: int = Field(587, alias="SMTP_PORT")
    smtp_user: str = Field("", alias="SMTP_USER")
    smtp_password: str = Field("", alias="SMTP_PASSWORD")
    mail_from: str = Field("no-reply@localhost", alias="MAIL_FROM")
    mail_from_name: str = Field("Marketplace", alias="MAIL_FROM_NAME")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.app_origin.split(",") if o.strip()]

    @property
    def primary_origin(self) -> str:
        origins = self.origins
        return origins[0].rstrip("/") if origins else ""

    def validated_env(self) -> str:
        env = self.env.strip().lower()
        if env not in _ALLOWED_ENVS:
            allowed = "|".join(sorted(_ALLOWED_ENVS))
            raise RuntimeError(f"ENV must be one of {allowed}")
        return env


@lru_cache
def get_settings() -> Settings:
    return Settings()
