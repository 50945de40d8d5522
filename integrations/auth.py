"""Caller identity forwarded by the deployment gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from utils.exceptions import AuthenticationError


USER_ID_HEADER = "X-User-Id"


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
    tier: str = "free"


class HeaderAuthenticator:
    """Trusts the user id header set by the gateway; tiers come from the subscription directory."""

    def __init__(self, tiers: Optional[Mapping[str, str]] = None, *, header_name: str = USER_ID_HEADER):
        self._tiers = {str(k).strip(): str(v).strip().lower() for k, v in dict(tiers or {}).items()}
        self.header_name = header_name

    def authenticate(self, headers: Mapping[str, str]) -> AuthenticatedUser:
        user_id = str(headers.get(self.header_name) or "").strip()
        if not user_id:
            raise AuthenticationError("Authentication required")
        return AuthenticatedUser(user_id=user_id, tier=self._tiers.get(user_id, "free"))

    def set_tier(self, user_id: str, tier: str) -> None:
        self._tiers[str(user_id).strip()] = str(tier).strip().lower()
