from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from app.backend.models.verification_code import VerificationCode, VerificationCodeType

log = logging.getLogger(__name__)


class VerificationCodeIssuer:
    """
    Issues and looks up single-use codes.
    Lookup never deletes; the caller deletes after the guarded action succeeds.
    """

    def __init__(self, db: Session):
        self.db = db

    def issue(self, user_id: UUID, code_type: VerificationCodeType, ttl: timedelta, now: datetime) -> VerificationCode:
        rec = VerificationCode(
            user_id=user_id,
            type=code_type.value,
            expires_at=now + ttl,
            created_at=now,
        )
        self.db.add(rec)
        self.db.commit()
        self.db.refresh(rec)
        log.info("verification code issued type=%s user_id=%s", code_type.value, user_id)
        return rec

    def find_valid(self, code_id: str, code_type: VerificationCodeType, now: datetime) -> Optional[VerificationCode]:
        stmt = select(VerificationCode).where(
            VerificationCode.code_id == code_id,
            VerificationCode.type == code_type.value,
            VerificationCode.expires_at > now,
        )
        return self.db.exec(stmt).first()

    def delete(self, rec: VerificationCode) -> None:
        self.db.delete(rec)
        self.db.commit()
        log.info("verification code consumed type=%s user_id=%s", rec.type, rec.user_id)

    def count_issued_since(self, user_id: UUID, code_type: VerificationCodeType, since: datetime) -> int:
        stmt = select(func.count()).select_from(VerificationCode).where(
            VerificationCode.user_id == user_id,
            VerificationCode.type == code_type.value,
            VerificationCode.created_at > since,
        )
        return int(self.db.exec(stmt).one())
