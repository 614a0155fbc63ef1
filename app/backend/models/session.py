from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlmodel import SQLModel, Field

from app.backend.core.security import now_utc


class AuthSession(SQLModel, table=True):
    """
    인증된 클라이언트 하나에 대응하는 서버측 세션.
    - refresh token은 session_id만 담으므로 이 행이 지워지면 즉시 무효가 된다.
    - expires_at은 refresh 회전 시 연장된다(session_id는 유지).
    """
    __tablename__ = "session"

    session_id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False, index=True)
    )
    user_agent: Optional[str] = None
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    created_at: datetime = Field(default_factory=now_utc, sa_column=Column(DateTime(timezone=True), nullable=False))
