from fastapi import Response

from app.backend.core.config import Settings

ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"
# refresh 쿠키는 refresh 엔드포인트에만 전송된다
REFRESH_COOKIE_PATH = "/auth/refresh"


def _base_options(settings: Settings) -> dict:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": settings.cookie_samesite,
        "domain": settings.cookie_domain,
    }


def set_access_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        path="/",
        **_base_options(settings),
    )


def set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=REFRESH_COOKIE_NAME,
        value=token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path=REFRESH_COOKIE_PATH,
        **_base_options(settings),
    )


def set_auth_cookies(response: Response, access_token: str, refresh_token: str, settings: Settings) -> None:
    set_access_cookie(response, access_token, settings)
    set_refresh_cookie(response, refresh_token, settings)


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    opts = _base_options(settings)
    response.delete_cookie(ACCESS_COOKIE_NAME, path="/", **opts)
    response.delete_cookie(REFRESH_COOKIE_NAME, path=REFRESH_COOKIE_PATH, **opts)
