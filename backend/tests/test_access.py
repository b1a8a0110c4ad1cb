"""View gating and the post-login landing page."""

from unittest.mock import MagicMock

import pytest

from client.tokens import SessionUser
from core.errors import UpstreamError, UpstreamUnavailable
from conftest import make_scout, make_talent
from services.access import login_destination, normalize_path, resolve_access, view_roles


def _user(role="TALENT", **kw):
    return SessionUser(id=42, email="jane@example.com", user_type=role, **kw)


def _not_found(path="/talents/user/42"):
    return UpstreamError(404, "not found", path)


# ---------------------------------------------------------------------------
# Route table
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw, expected", [
    ("/talent/dashboard/", "/talent/dashboard"),
    ("talent/dashboard", "/talent/dashboard"),
    ("", "/"),
    ("/", "/"),
])
def test_normalize_path(raw, expected):
    assert normalize_path(raw) == expected


@pytest.mark.parametrize("path, roles", [
    ("/talent/calendar", {"TALENT"}),
    ("/talent/profile/edit", {"TALENT"}),
    ("/talent/12", {"SCOUT", "ADMIN"}),
    ("/scout/talents", {"SCOUT"}),
    ("/admin/matches", {"ADMIN"}),
    ("/teams/4", None),
    ("/account/settings", None),
])
def test_view_roles(path, roles):
    known, allowed = view_roles(path)
    assert known
    assert (set(allowed) if allowed is not None else None) == roles


def test_unknown_view():
    assert view_roles("/nowhere") == (False, None)


# ---------------------------------------------------------------------------
# resolve_access — decision order
# ---------------------------------------------------------------------------

def test_no_session_redirects_to_login(upstream):
    decision = resolve_access(None, "/talent/dashboard", None)
    assert (decision.action, decision.target) == ("redirect", "/login")


def test_unknown_path_redirects_to_login(upstream):
    decision = resolve_access(_user(), "/secret", upstream)
    assert (decision.action, decision.target) == ("redirect", "/login")


def test_wrong_role_redirects_home(upstream):
    decision = resolve_access(_user("SCOUT"), "/talent/dashboard", upstream)
    assert (decision.action, decision.target) == ("redirect", "/")
    upstream.get_scout_by_user.assert_not_called()


@pytest.mark.parametrize("role, target", [
    ("TALENT", "/talent/dashboard"),
    ("SCOUT", "/scout/dashboard"),
    ("ADMIN", "/admin/dashboard"),
])
def test_root_redirects_to_dashboard(upstream, role, target):
    decision = resolve_access(_user(role), "/", upstream)
    assert (decision.action, decision.target) == ("redirect", target)


def test_onboarding_page_renders_without_probe(upstream):
    decision = resolve_access(_user(), "/talent/create", upstream)
    assert decision.action == "render"
    upstream.get_talent_by_user.assert_not_called()


def test_known_profile_renders_without_probe(upstream):
    decision = resolve_access(_user(talent_id=7), "/talent/history", upstream)
    assert decision.action == "render"
    upstream.get_talent_by_user.assert_not_called()


def test_admin_renders_without_probe(upstream):
    decision = resolve_access(_user("ADMIN"), "/admin/users", upstream)
    assert decision.action == "render"
    upstream.get_talent_by_user.assert_not_called()
    upstream.get_scout_by_user.assert_not_called()


def test_probe_found_records_profile(upstream):
    upstream.get_scout_by_user.return_value = make_scout(id=11)
    user = _user("SCOUT")
    decision = resolve_access(user, "/scout/dashboard", upstream)
    assert (decision.action, decision.profile_id) == ("render", 11)
    assert user.scout_id == 11


def test_probe_404_sends_to_onboarding(upstream):
    upstream.get_talent_by_user.side_effect = _not_found()
    decision = resolve_access(_user(), "/talent/dashboard", upstream)
    assert (decision.action, decision.target) == ("onboarding", "/talent/create")


@pytest.mark.parametrize("status", [401, 403])
def test_probe_auth_failure_logs_out(upstream, status):
    upstream.get_talent_by_user.side_effect = UpstreamError(status, "", "/talents/user/42")
    decision = resolve_access(_user(), "/talent/dashboard", upstream)
    assert (decision.action, decision.target, decision.logout) == ("redirect", "/login", True)


@pytest.mark.parametrize("exc", [UpstreamError(500, "boom", "/talents/user/42"), UpstreamUnavailable()])
def test_probe_other_failure_is_error(upstream, exc):
    upstream.get_talent_by_user.side_effect = exc
    decision = resolve_access(_user(), "/talent/dashboard", upstream)
    assert (decision.action, decision.message) == ("error", "Failed to load profile")
    assert not decision.logout


# ---------------------------------------------------------------------------
# login_destination
# ---------------------------------------------------------------------------

def test_admin_lands_on_admin_dashboard():
    client = MagicMock()
    assert login_destination(client, _user("ADMIN")) == ("/admin/dashboard", None)
    client.get_talent_by_user.assert_not_called()


def test_talent_with_profile_lands_on_dashboard(upstream):
    upstream.get_talent_by_user.return_value = make_talent(id=7)
    user = _user()
    assert login_destination(upstream, user) == ("/talent/dashboard", None)
    assert user.talent_id == 7


def test_scout_without_profile_goes_to_onboarding(upstream):
    upstream.get_scout_by_user.side_effect = _not_found("/scouts/user/42")
    assert login_destination(upstream, _user("SCOUT")) == ("/scout/create", None)


def test_profile_check_failure_lands_on_dashboard_with_warning(upstream):
    upstream.get_talent_by_user.side_effect = UpstreamError(500, "boom", "/talents/user/42")
    assert login_destination(upstream, _user()) == ("/talent/dashboard", "Error checking profile status")
