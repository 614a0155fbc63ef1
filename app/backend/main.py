# app/backend/main.py
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import text

from app.backend.core.config import get_settings
from app.backend.core.errors import register_exception_handlers
from app.backend.core.logging_config import setup_logging
from app.db.session import engine

# 모델 모듈 임포트(테이블 등록 보장용)
from app.db import base as _models  # noqa: F401

# 라우터
from app.backend.routers import auth, sessions, user

settings = get_settings()
settings.validated_env()

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")

# CORS (쿠키 인증이므로 credentials 허용 + origin 명시)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 라우터 등록
app.include_router(auth.auth_router)
app.include_router(sessions.router)
app.include_router(user.user_router)


@app.get("/health")
def health_app():
    return {"ok": True}


@app.get("/health/db")
def health_db():
    # Migration is a deployment concern. Runtime only verifies DB connectivity.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        logger.exception("database health check failed")
        raise HTTPException(status_code=500, detail="Database connection failed")
