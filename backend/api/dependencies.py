"""
dependencies.py — FastAPI dependency injection

Session and upstream-client plumbing shared by every route handler:

    get_db()                 request-scoped SQLAlchemy session (session store)
    get_session_store()      SessionStore over that session
    get_current_session()    the caller's portal session, or 401 → /login
    get_optional_upstream()  ScoutingApiClient for the session, or None
    get_upstream()           ScoutingApiClient carrying the session's token;
                             an upstream 401/403 ends the session
    require_roles(*roles)    SessionUser, or 403 → / for other roles
    get_talent_id() / get_scout_id()
                             the caller's profile id, probed once and remembered

Usage in a route handler:
    from fastapi import Depends
    from api.dependencies import get_upstream, require_roles

    @router.get("/example")
    def example(
        user: SessionUser = Depends(require_roles("SCOUT")),
        client: ScoutingApiClient = Depends(get_upstream),
    ):
        ...
"""

from typing import Generator, Optional

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.config import settings
from core.errors import AccessDenied, PortalError, SessionExpired, UpstreamError
from db.database import SessionLocal
from db.models import PortalSession
from db.session_store import SessionStore, to_session_user

SESSION_HEADER = "X-Session-ID"


def get_db() -> Generator[Session, None, None]:
    """Yield a database session, guaranteed to close after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connectivity(db: Optional[Session] = None) -> bool:
    """Execute SELECT 1 to verify the session store is reachable.

    Raises:
        RuntimeError: with a descriptive message if the connection fails.
    """
    own = db is None
    db = db or SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        raise RuntimeError(f"Session store connectivity check failed: {exc}") from exc
    finally:
        if own:
            db.close()


def get_session_store(db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(db)


def session_id_from(request: Request) -> Optional[str]:
    """Browsers send the cookie; scripts and the CLI may send the header."""
    return request.cookies.get(settings.session_cookie_name) or request.headers.get(SESSION_HEADER)


def get_optional_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> Optional[PortalSession]:
    row = store.get(session_id_from(request))
    if row is not None:
        request.state.user_id = row.user_id
    return row


def get_current_session(
    row: Optional[PortalSession] = Depends(get_optional_session),
) -> PortalSession:
    if row is None:
        raise SessionExpired()
    return row


def get_current_user(row: PortalSession = Depends(get_current_session)) -> SessionUser:
    return to_session_user(row)


def make_client(request: Request, token: Optional[str] = None) -> ScoutingApiClient:
    return ScoutingApiClient(
        settings.upstream_api_url,
        token=token,
        timeout=settings.upstream_timeout_seconds,
        request_id=getattr(request.state, "request_id", None),
    )


def get_anonymous_client(request: Request) -> Generator[ScoutingApiClient, None, None]:
    """Client without a token, for login and registration."""
    client = make_client(request)
    try:
        yield client
    finally:
        client.session.close()


def get_optional_upstream(
    request: Request,
    row: Optional[PortalSession] = Depends(get_optional_session),
) -> Generator[Optional[ScoutingApiClient], None, None]:
    """Client for the session when there is one, else None (view gating)."""
    if row is None:
        yield None
        return
    client = make_client(request, token=row.token)
    try:
        yield client
    finally:
        client.session.close()


def get_upstream(
    request: Request,
    row: PortalSession = Depends(get_current_session),
    store: SessionStore = Depends(get_session_store),
) -> Generator[ScoutingApiClient, None, None]:
    """Authenticated client; an upstream 401/403 logs the session out.

    Calendar endpoints are exempt: the upstream API answers 403 there for
    ordinary permission problems, which must not end the session.
    """
    client = make_client(request, token=row.token)
    try:
        yield client
    except UpstreamError as exc:
        if exc.is_auth_failure and not exc.is_calendar_call:
            store.delete(row.id)
            exc.redirect = "/login"
        raise
    finally:
        client.session.close()


def require_roles(*roles: str):
    """Dependency factory: the current user, provided their role is listed."""

    def _dependency(user: SessionUser = Depends(get_current_user)) -> SessionUser:
        if roles and user.user_type not in roles:
            raise AccessDenied()
        return user

    return _dependency


def get_talent_id(
    user: SessionUser = Depends(require_roles("TALENT")),
    row: PortalSession = Depends(get_current_session),
    client: ScoutingApiClient = Depends(get_upstream),
    store: SessionStore = Depends(get_session_store),
) -> int:
    if user.talent_id is not None:
        return user.talent_id
    try:
        talent_id = client.get_talent_by_user(user.id).id
    except UpstreamError as exc:
        if exc.is_not_found:
            raise PortalError("Complete your talent profile first", 409) from exc
        raise
    store.update_profile(row.id, talent_id=talent_id)
    return talent_id


def get_scout_id(
    user: SessionUser = Depends(require_roles("SCOUT")),
    row: PortalSession = Depends(get_current_session),
    client: ScoutingApiClient = Depends(get_upstream),
    store: SessionStore = Depends(get_session_store),
) -> int:
    if user.scout_id is not None:
        return user.scout_id
    try:
        scout_id = client.get_scout_by_user(user.id).id
    except UpstreamError as exc:
        if exc.is_not_found:
            raise PortalError("Complete your scout profile first", 409) from exc
        raise
    store.update_profile(row.id, scout_id=scout_id)
    return scout_id
