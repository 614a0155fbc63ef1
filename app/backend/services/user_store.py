from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.backend.core.errors import ConflictError
from app.backend.core.security import now_utc
from app.backend.models.user import User

log = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.exec(select(User).where(User.email == normalize_email(email))).first()

    def create(self, *, email: str, password_hash: str, name: str, telephone: Optional[str]) -> User:
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=name,
            telephone=telephone,
            verified=False,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # 동시 가입 경쟁: unique 인덱스가 최종 판정
            self.db.rollback()
            raise ConflictError("Email already in use")
        self.db.refresh(user)
        log.info("user created user_id=%s", user.user_id)
        return user

    def update(self, user: User, **fields) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = now_utc()
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
