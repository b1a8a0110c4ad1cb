"""schemas/access.py — Outcome of gating a portal view for a session."""

from __future__ import annotations

from typing import Literal, Optional

from schemas.shared import CamelModel

Action = Literal["render", "redirect", "onboarding", "error"]


class AccessDecisionResponse(CamelModel):
    path: str
    action: Action
    target: Optional[str] = None     # where to navigate for redirect / onboarding
    message: Optional[str] = None    # shown to the user when action == "error"
