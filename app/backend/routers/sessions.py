from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.backend.core.errors import NotFoundError
from app.backend.core.security import ensure_aware, now_utc
from app.backend.dependencies.auth import AuthContext, get_current_auth
from app.backend.schemas.auth import MessageResponse, SessionOut
from app.backend.services.session_store import SessionStore
from app.db.session import get_session

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=List[SessionOut])
def list_sessions(
    auth: AuthContext = Depends(get_current_auth),
    db: Session = Depends(get_session),
):
    rows = SessionStore(db).list_live_for_user(auth.user_id, now_utc())
    return [
        SessionOut(
            session_id=row.session_id,
            user_agent=row.user_agent,
            created_at=ensure_aware(row.created_at),
            expires_at=ensure_aware(row.expires_at),
            is_current=row.session_id == auth.session_id,
        )
        for row in rows
    ]


@router.delete("/{session_id}", response_model=MessageResponse)
def delete_session(
    session_id: UUID,
    auth: AuthContext = Depends(get_current_auth),
    db: Session = Depends(get_session),
):
    store = SessionStore(db)
    row = store.get(session_id)
    if row is None or row.user_id != auth.user_id:
        raise NotFoundError("Session not found")
    store.delete_row(row)
    return MessageResponse(message="Session removed")
