"""schemas/user.py — User accounts and admin statistics."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from schemas.auth import Role
from schemas.shared import CamelModel, PaginationMeta, check_email, check_password


class User(CamelModel):
    id: int
    email: str
    user_type: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    talent_id: Optional[int] = None
    scout_id: Optional[int] = None


class UserForm(CamelModel):
    """Admin create/update form. Password is optional on update."""

    email: str
    user_type: Role
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: Optional[str]) -> Optional[str]:
        # Blank on update keeps the current password
        return check_password(v) if v else None

    def to_upstream(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class UserListResponse(CamelModel):
    data: list[User]
    meta: PaginationMeta


class SystemStats(CamelModel):
    user_count: int = 0
    talent_count: int = 0
    scout_count: int = 0
    team_count: int = 0
    scheduled_match_count: int = 0
    match_history_count: int = 0


class BackupRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)


class CascadeDeleteResponse(CamelModel):
    user_id: int
    scout_deleted: bool
    talent_deleted: bool
    match_history_deleted: int
    scouting_reports_deleted: int
    warnings: list[str]
