"""Remote authentication endpoints"""

from typing import Any, Dict, Tuple

from card_portal.domain.models import UserProfile
from card_portal.infrastructure.clients.base import PortalAPIClient
from card_portal.infrastructure.clients.schemas import LoginPayload, UserPayload, parse_model, unwrap


class AuthClient(PortalAPIClient):
    """Client for /api/auth"""

    async def login(self, username: str, password: str) -> Tuple[str, UserProfile]:
        """
        Exchange credentials for a bearer token and user profile.

        Raises:
            AuthenticationError: Credentials rejected
            InvalidResponseError: Response lacks a token or user
        """
        payload = await self._request(
            "POST",
            "/api/auth/login",
            operation="auth.login",
            json={"username": username, "password": password},
        )
        login = parse_model(payload, LoginPayload)
        return login.token, login.user.to_domain()

    async def register(self, registration: Dict[str, Any]) -> UserProfile:
        """Create a portal user; only the validated profile fields are kept"""
        payload = await self._request("POST", "/api/auth/register", operation="auth.register", json=registration)
        return parse_model(payload, UserPayload).to_domain()

    async def validate_token(self) -> UserProfile | None:
        """
        Check the client's token with the remote API.

        Returns the user when the remote echoes one back, else None.

        Raises:
            AuthenticationError: Token expired or revoked
        """
        payload = await self._request("GET", "/api/auth/validate", operation="auth.validate")
        data = unwrap(payload)
        if isinstance(data, dict) and "user" in data:
            data = data["user"]
        if isinstance(data, dict) and "id" in data:
            return parse_model(data, UserPayload).to_domain()
        return None
