"""client/tokens.py — Bearer token inspection.

The upstream API issues JWTs whose payload looks like:

    {"sub": "jane@example.com", "userId": 42,
     "roles": [{"authority": "ROLE_SCOUT"}], "iat": ..., "exp": ...}

The portal only reads the claims to learn who logged in and with which role.
Signatures are not verified here: the upstream API validates the token on
every call and stays the authority.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Optional

from core.errors import AuthenticationError

ROLES = ("TALENT", "SCOUT", "ADMIN")
DEFAULT_AUTHORITY = "ROLE_TALENT"
_ROLE_PREFIX = "ROLE_"


@dataclass
class SessionUser:
    """Identity of the logged-in user as the portal tracks it."""

    id: int
    email: str
    user_type: str
    talent_id: Optional[int] = None
    scout_id: Optional[int] = None

    @property
    def profile_id(self) -> Optional[int]:
        if self.user_type == "TALENT":
            return self.talent_id
        if self.user_type == "SCOUT":
            return self.scout_id
        return None


def is_well_formed(token: Optional[str]) -> bool:
    """True when the token has the three dot-separated JWT segments."""
    if not token:
        return False
    return len(token.strip().split(".")) == 3


def decode_claims(token: str) -> dict[str, Any]:
    """Decode the payload segment of a JWT without verifying it."""
    if not is_well_formed(token):
        raise AuthenticationError("Invalid token format received from server")

    payload = token.strip().split(".")[1]
    payload += "=" * (-len(payload) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise AuthenticationError("Failed to extract user data from token") from exc

    if not isinstance(claims, dict):
        raise AuthenticationError("Failed to extract user data from token")
    return claims


def normalize_role(raw: Any) -> str:
    """Map "ROLE_SCOUT", "SCOUT" or {"authority": "ROLE_SCOUT"} to "SCOUT"."""
    if isinstance(raw, dict):
        raw = raw.get("authority")
    if not isinstance(raw, str):
        raise AuthenticationError("Invalid user role")

    role = raw[len(_ROLE_PREFIX):] if raw.startswith(_ROLE_PREFIX) else raw
    role = role.upper()
    if role not in ROLES:
        raise AuthenticationError("Invalid user role")
    return role


def user_from_token(token: str) -> SessionUser:
    """Build the session user from the token claims.

    The first granted authority decides the role; a token with an empty
    roles list is treated as a talent account.
    """
    claims = decode_claims(token)

    roles = claims.get("roles")
    if not claims.get("sub") or not isinstance(roles, list):
        raise AuthenticationError("Failed to extract user data from token")

    authority = roles[0] if roles else DEFAULT_AUTHORITY
    if isinstance(authority, dict) and not authority.get("authority"):
        authority = DEFAULT_AUTHORITY
    user_type = normalize_role(authority)

    user_id = claims.get("userId")
    if user_id in (None, "", 0):
        raise AuthenticationError("No user ID found in token data")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("No user ID found in token data") from exc

    return SessionUser(id=user_id, email=str(claims["sub"]), user_type=user_type)
