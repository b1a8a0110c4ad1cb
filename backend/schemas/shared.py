"""schemas/shared.py — Reusable building blocks shared across schema modules."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Same loose shape check the browser forms applied; the upstream API does the
# authoritative validation.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class CamelModel(BaseModel):
    """Base for every model exchanged with the upstream API or the browser.

    Upstream JSON is camelCase; Python code uses snake_case attributes. Both
    spellings are accepted on input, responses are emitted camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_upstream(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class PaginationMeta(CamelModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class MessageResponse(CamelModel):
    message: str


def check_email(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Email is required")
    if not _EMAIL_RE.match(value):
        raise ValueError("Invalid email")
    return value


def check_required(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


def check_password(value: str, label: str = "Password") -> str:
    # Passwords are sent as typed; no stripping
    if not value:
        raise ValueError(f"{label} is required")
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return value
