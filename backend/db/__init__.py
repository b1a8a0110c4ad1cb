"""Database package for the scouting portal session store."""

from .database import Base, engine, SessionLocal, init_db
from .models import PortalSession
from .session_store import SessionStore, to_session_user

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "init_db",
    "PortalSession",
    "SessionStore",
    "to_session_user",
]
