from uuid import UUID

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.backend.core.errors import BadRequestError, NotFoundError
from app.backend.dependencies.auth import AuthContext, get_current_auth
from app.backend.schemas.auth import PublicUserOut, UpdateUserBody, UserOut
from app.backend.services.user_store import UserStore, normalize_email
from app.db.session import get_session

user_router = APIRouter(tags=["user"])


@user_router.get("/myuser", response_model=UserOut)
def get_my_user(
    auth: AuthContext = Depends(get_current_auth),
    db: Session = Depends(get_session),
):
    user = UserStore(db).get(auth.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@user_router.put("/myuser/update", response_model=UserOut)
def update_my_user(
    body: UpdateUserBody,
    auth: AuthContext = Depends(get_current_auth),
    db: Session = Depends(get_session),
):
    users = UserStore(db)
    user = users.get(auth.user_id)
    if user is None:
        raise NotFoundError("User not found")

    fields = {}
    if body.name:
        fields["name"] = body.name
    if body.telephone:
        fields["telephone"] = body.telephone
    if body.email:
        if users.find_by_email(body.email):
            raise BadRequestError("Email already in use")
        # 새 주소는 다시 인증이 필요
        fields["email"] = normalize_email(body.email)
        fields["verified"] = False
    if not fields:
        raise BadRequestError("No fields to update")
    return users.update(user, **fields)


@user_router.get("/user/{user_id}", response_model=PublicUserOut)
def get_public_user(user_id: UUID, db: Session = Depends(get_session)):
    user = UserStore(db).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
