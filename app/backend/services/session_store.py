from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlmodel import Session, select

from app.backend.models.session import AuthSession

log = logging.getLogger(__name__)


class SessionStore:
    """CRUD over session rows. Expiry is checked by callers at use time."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, *, user_id: UUID, user_agent: Optional[str], expires_at: datetime) -> AuthSession:
        row = AuthSession(user_id=user_id, user_agent=user_agent, expires_at=expires_at)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        log.info("session created session_id=%s user_id=%s", row.session_id, user_id)
        return row

    def get(self, session_id: UUID) -> Optional[AuthSession]:
        return self.db.get(AuthSession, session_id)

    def extend(self, row: AuthSession, expires_at: datetime) -> AuthSession:
        row.expires_at = expires_at
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        log.info("session extended session_id=%s", row.session_id)
        return row

    def delete(self, session_id: UUID) -> bool:
        row = self.db.get(AuthSession, session_id)
        if row is None:
            return False
        self.delete_row(row)
        return True

    def delete_row(self, row: AuthSession) -> None:
        session_id = row.session_id
        self.db.delete(row)
        self.db.commit()
        log.info("session deleted session_id=%s", session_id)

    def delete_for_user(self, user_id: UUID) -> int:
        rows = self.db.exec(select(AuthSession).where(AuthSession.user_id == user_id)).all()
        for row in rows:
            self.db.delete(row)
        self.db.commit()
        log.info("sessions deleted user_id=%s count=%d", user_id, len(rows))
        return len(rows)

    def list_live_for_user(self, user_id: UUID, now: datetime) -> List[AuthSession]:
        stmt = (
            select(AuthSession)
            .where(AuthSession.user_id == user_id, AuthSession.expires_at > now)
            .order_by(AuthSession.created_at.desc())
        )
        return list(self.db.exec(stmt).all())
