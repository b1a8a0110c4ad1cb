"""Portal session store — create, look up, update, and drop logged-in sessions.

Usage:
    store = SessionStore(db)
    row = store.create(token, user)
    row = store.get(session_id)        # None when unknown, expired, or corrupt
    store.update_profile(row.id, talent_id=7)
    store.delete(row.id)
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from client.tokens import SessionUser, is_well_formed
from core.config import settings

from .models import PortalSession, utcnow

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, db: Session, ttl_hours: Optional[int] = None):
        self.db = db
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else settings.session_ttl_hours)

    def create(self, token: str, user: SessionUser) -> PortalSession:
        row = PortalSession(
            id=uuid.uuid4().hex,
            token=token,
            user_role=user.user_type,
            user_id=user.id,
            email=user.email,
            talent_id=user.talent_id,
            scout_id=user.scout_id,
            expires_at=utcnow() + self.ttl,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("session created", extra={"user_id": user.id, "user_type": user.user_type})
        return row

    def get(self, session_id: Optional[str]) -> Optional[PortalSession]:
        """Return the live session, dropping it first if it is expired or corrupt."""
        if not session_id:
            return None
        row = self.db.get(PortalSession, session_id)
        if row is None:
            return None

        if row.expires_at <= utcnow():
            logger.info("session expired", extra={"user_id": row.user_id})
            self._drop(row)
            return None
        if not is_well_formed(row.token):
            logger.warning("session held a malformed token", extra={"user_id": row.user_id})
            self._drop(row)
            return None
        return row

    def update_profile(
        self,
        session_id: str,
        talent_id: Optional[int] = None,
        scout_id: Optional[int] = None,
    ) -> Optional[PortalSession]:
        row = self.db.get(PortalSession, session_id)
        if row is None:
            return None
        if talent_id is not None:
            row.talent_id = talent_id
        if scout_id is not None:
            row.scout_id = scout_id
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, session_id: str) -> bool:
        row = self.db.get(PortalSession, session_id)
        if row is None:
            return False
        self._drop(row)
        logger.info("session ended", extra={"user_id": row.user_id})
        return True

    def delete_for_user(self, user_id: int) -> int:
        """Log out every session of a user (used when an admin deletes them)."""
        result = self.db.execute(delete(PortalSession).where(PortalSession.user_id == user_id))
        self.db.commit()
        return result.rowcount or 0

    def purge_expired(self) -> int:
        result = self.db.execute(delete(PortalSession).where(PortalSession.expires_at <= utcnow()))
        self.db.commit()
        purged = result.rowcount or 0
        if purged:
            logger.info("expired sessions purged", extra={"count": purged})
        return purged

    def _drop(self, row: PortalSession) -> None:
        self.db.delete(row)
        self.db.commit()


def to_session_user(row: PortalSession) -> SessionUser:
    return SessionUser(
        id=row.user_id,
        email=row.email,
        user_type=row.user_role,
        talent_id=row.talent_id,
        scout_id=row.scout_id,
    )
