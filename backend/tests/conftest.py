"""
Shared fixtures for the portal test suite.

Nothing here touches the network: the upstream API is a MagicMock shaped
like ScoutingApiClient, and the session store is an in-memory SQLite
database created fresh for every test.

Run from the project root:
    cd backend
    pytest tests -v
"""

import base64
import json
import os
import sys
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api import dependencies  # noqa: E402
from api.main import app  # noqa: E402
from client.api_client import ScoutingApiClient  # noqa: E402
from client.tokens import SessionUser  # noqa: E402
from db.database import init_db  # noqa: E402
from db.session_store import SessionStore  # noqa: E402
from schemas.match import MatchCalendar, MatchHistory  # noqa: E402
from schemas.scout import Scout  # noqa: E402
from schemas.talent import Talent  # noqa: E402
from schemas.team import Team  # noqa: E402


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def _segment(obj) -> str:
    return base64.urlsafe_b64encode(json.dumps(obj).encode()).rstrip(b"=").decode()


def make_token(user_id=42, email="jane@example.com", role="ROLE_TALENT", **claims) -> str:
    """Unsigned JWT with the claim layout the upstream API issues."""
    payload = {"sub": email, "userId": user_id, "roles": [{"authority": role}] if role else []}
    payload.update(claims)
    return f"{_segment({'alg': 'HS256', 'typ': 'JWT'})}.{_segment(payload)}.sig"


# ---------------------------------------------------------------------------
# Upstream resource builders
# ---------------------------------------------------------------------------

def make_talent(**overrides) -> Talent:
    data = dict(
        id=7, user_id=42, first_name="Jane", last_name="Doe", age=19,
        position="FORWARD", team_id=3, matches_played=10, goals=5, assists=2,
        clean_sheets=0, team_name="Riverside FC",
    )
    data.update(overrides)
    return Talent(**data)


def make_team(**overrides) -> Team:
    data = dict(id=3, name="Riverside FC", city="Leeds", age_group="U18", player_ids=[7])
    data.update(overrides)
    return Team(**data)


def make_scout(**overrides) -> Scout:
    data = dict(id=11, user_id=50, first_name="Sam", last_name="Reed",
                email="sam@example.com", followed_talent_ids=[])
    data.update(overrides)
    return Scout(**data)


def make_history(**overrides) -> MatchHistory:
    data = dict(id=1, talent_id=7, match_date="2024-03-02", opponent_team="Hill United",
                goals=1, assists=0, starter=True, clean_sheet=False, rating=7.5)
    data.update(overrides)
    return MatchHistory(**data)


def make_calendar(**overrides) -> MatchCalendar:
    data = dict(id=1, home_team_id=3, guest_team_id=4,
                match_date_time="2024-05-01T15:00:00", description="League")
    data.update(overrides)
    return MatchCalendar(**data)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def store(db):
    return SessionStore(db)


@pytest.fixture
def upstream():
    mock = MagicMock(spec=ScoutingApiClient)
    mock.session = MagicMock()
    return mock


@pytest.fixture
def client(db, upstream, monkeypatch):
    """TestClient wired to the in-memory store and the mocked upstream API."""

    def _get_db():
        yield db

    monkeypatch.setattr(dependencies, "make_client", lambda request, token=None: upstream)
    app.dependency_overrides[dependencies.get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(store):
    """Create a stored session and return the headers that carry it."""

    def _login(role="TALENT", user_id=42, email="jane@example.com", talent_id=None, scout_id=None):
        user = SessionUser(id=user_id, email=email, user_type=role,
                           talent_id=talent_id, scout_id=scout_id)
        row = store.create(make_token(user_id, email, f"ROLE_{role}"), user)
        return {dependencies.SESSION_HEADER: row.id}

    return _login
