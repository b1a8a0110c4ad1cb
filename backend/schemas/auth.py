"""schemas/auth.py — Login, registration, session, and password forms."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import field_validator, model_validator

from schemas.shared import CamelModel, check_email, check_password

Role = Literal["TALENT", "SCOUT", "ADMIN"]


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class RegisterRequest(CamelModel):
    email: str
    password: str
    confirm_password: str
    # Admin accounts are created by admins, never self-registered
    user_type: Literal["TALENT", "SCOUT"] = "TALENT"

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self

    def to_upstream(self) -> dict:
        return {"email": self.email, "password": self.password, "userType": self.user_type}


class ChangePasswordRequest(CamelModel):
    new_password: str
    confirm_password: str

    @field_validator("new_password")
    @classmethod
    def _new_password(cls, v: str) -> str:
        return check_password(v, "New password")

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords must match")
        return self


class SessionUserResponse(CamelModel):
    id: int
    email: str
    user_type: Role
    talent_id: Optional[int] = None
    scout_id: Optional[int] = None


class SessionResponse(CamelModel):
    """Returned by login/register/session: who is logged in and where to go."""

    session_id: str
    user: SessionUserResponse
    redirect: str
    warning: Optional[str] = None
