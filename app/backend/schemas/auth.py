from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints, model_validator

TELEPHONE_RE = re.compile(r"^(0[567]\d{8}|\+213[567]\d{8})$")

PasswordStr = Annotated[str, StringConstraints(min_length=6, max_length=255)]
NameStr = Annotated[str, StringConstraints(min_length=2, max_length=100, strip_whitespace=True)]
CodeStr = Annotated[str, StringConstraints(min_length=1, max_length=25)]


def _check_telephone(value: Optional[str]) -> Optional[str]:
    if value is not None and not TELEPHONE_RE.match(value):
        raise ValueError(
            "Invalid phone number. Must start with 06, 07, 05, or +213 followed by 8 digits"
        )
    return value


TelephoneStr = Annotated[str, AfterValidator(_check_telephone)]


def _check_email_length(value: str) -> str:
    if len(value) > 255:
        raise ValueError("Email must be at most 255 characters")
    return value


Email = Annotated[EmailStr, AfterValidator(_check_email_length)]


class LoginBody(BaseModel):
    email: Email
    password: PasswordStr


class RegisterBody(LoginBody):
    model_config = ConfigDict(populate_by_name=True)

    name: NameStr
    telephone: TelephoneStr
    confirm_password: PasswordStr = Field(alias="confirmPassword")

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class ForgotPasswordBody(BaseModel):
    email: Email


class ResetPasswordBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password: PasswordStr
    verification_code: CodeStr = Field(alias="verificationCode")


class UpdateUserBody(BaseModel):
    name: Optional[NameStr] = None
    telephone: Optional[TelephoneStr] = None
    email: Optional[Email] = None


class MessageResponse(BaseModel):
    message: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    email: str
    name: str
    telephone: Optional[str] = None
    verified: bool
    created_at: datetime
    updated_at: datetime


class PublicUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    name: str


class SessionOut(BaseModel):
    session_id: UUID
    user_agent: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    is_current: bool = False
