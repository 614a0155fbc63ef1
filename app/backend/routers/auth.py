from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.backend.core.config import Settings, get_settings
from app.backend.core.cookies import (
    ACCESS_COOKIE_NAME,
    REFRESH_COOKIE_NAME,
    clear_auth_cookies,
    set_access_cookie,
    set_auth_cookies,
    set_refresh_cookie,
)
from app.backend.dependencies.auth import get_auth_service
from app.backend.schemas.auth import (
    ForgotPasswordBody,
    LoginBody,
    MessageResponse,
    RegisterBody,
    ResetPasswordBody,
    UserOut,
)
from app.backend.services.auth_service import AuthService

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterBody,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """
    가입 → 인증 메일(실패해도 계속) → 세션 생성 → 두 토큰 쿠키 세팅.
    """
    outcome = service.register(body, user_agent=request.headers.get("user-agent"))
    set_auth_cookies(response, outcome.tokens.access_token, outcome.tokens.refresh_token, settings)
    return outcome.user


@auth_router.post("/login", response_model=MessageResponse)
def login(
    body: LoginBody,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    tokens = service.login(body, user_agent=request.headers.get("user-agent"))
    set_auth_cookies(response, tokens.access_token, tokens.refresh_token, settings)
    return MessageResponse(message="Login successful")


@auth_router.get("/refresh", response_model=MessageResponse)
def refresh(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    """
    Access token은 항상 재발급, refresh token은 세션 만료 24시간 이내일 때만 회전.
    """
    outcome = service.refresh(request.cookies.get(REFRESH_COOKIE_NAME))
    if outcome.refresh_token:
        set_refresh_cookie(response, outcome.refresh_token, settings)
    set_access_cookie(response, outcome.access_token, settings)
    return MessageResponse(message="Access token refreshed")


@auth_router.get("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    service.logout(request.cookies.get(ACCESS_COOKIE_NAME))
    response = JSONResponse({"message": "Logout successful"})
    clear_auth_cookies(response, settings)
    return response


@auth_router.get("/email/verify/{code}", response_model=MessageResponse)
def verify_email(code: str, service: AuthService = Depends(get_auth_service)):
    service.verify_email(code)
    return MessageResponse(message="Email was successfully verified")


@auth_router.post("/password/forgot", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordBody, service: AuthService = Depends(get_auth_service)):
    service.forgot_password(body.email)
    return MessageResponse(message="Password reset email sent")


@auth_router.post("/password/reset", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordBody,
    service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
):
    service.reset_password(body.verification_code, body.password)
    response = JSONResponse({"message": "Password was reset successfully"})
    clear_auth_cookies(response, settings)
    return response
