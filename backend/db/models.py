"""SQLAlchemy models for the portal session store.

The upstream API owns every scouting resource; the only thing the portal
persists is who is logged in, which replaces the token / role / user
triple a browser would otherwise keep in local storage.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from .database import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo on the way back anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PortalSession(Base):
    """One logged-in browser or CLI client."""

    __tablename__ = "portal_sessions"

    id = Column(String(32), primary_key=True)          # uuid4 hex, sent as cookie
    token = Column(Text, nullable=False)               # upstream bearer token
    user_role = Column(String(10), nullable=False)     # TALENT / SCOUT / ADMIN

    # User identity decoded from the token
    user_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=False)

    # Profile ids learned after onboarding or a successful profile probe
    talent_id = Column(Integer)
    scout_id = Column(Integer)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<PortalSession(id='{self.id[:8]}…', user_id={self.user_id}, role='{self.user_role}')>"
