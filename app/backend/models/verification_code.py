from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlmodel import SQLModel, Field

from app.backend.core.security import new_code_id, now_utc


class VerificationCodeType(str, Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


class VerificationCode(SQLModel, table=True):
    """Single-use code; deleted once consumed."""
    __tablename__ = "verification_code"

    __table_args__ = (
        Index("ix_verification_code_user_type_created", "user_id", "type", "created_at"),
    )

    code_id: str = Field(default_factory=new_code_id, primary_key=True, max_length=25)
    user_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user.user_id", ondelete="CASCADE"), nullable=False, index=True)
    )
    type: str = Field(sa_column=Column(String(32), nullable=False))  # VerificationCodeType 값
    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    created_at: datetime = Field(default_factory=now_utc, sa_column=Column(DateTime(timezone=True), nullable=False))
