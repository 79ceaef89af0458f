"""Supabase Auth implementation of the identity provider."""

import logging
from dataclasses import dataclass

from supabase import Client

from calories_daily.domain.errors import AuthenticationError
from calories_daily.domain.session import SessionUser
from calories_daily.services.auth import IdentityProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Email and password auth through the Supabase client."""

    client: Client

    def current_user(self) -> SessionUser | None:
        """Return the user of the session the client restored, if any."""
        try:
            session = self.client.auth.get_session()
        except Exception:
            _logger.exception("Failed to restore auth session")
            return None
        if session is None:
            return None
        return _to_session_user(session.user)

    def sign_up(self, email: str, password: str) -> SessionUser | None:
        """Register a user. Returns None while the email awaits confirmation."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:
            raise AuthenticationError(f"Sign-up failed: {exc}") from exc
        if response.session is None:
            _logger.info("Sign-up for %s is waiting for confirmation", email)
            return None
        return _to_session_user(response.user)

    def sign_in(self, email: str, password: str) -> SessionUser:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise AuthenticationError(f"Sign-in failed: {exc}") from exc
        user = _to_session_user(response.user)
        if user is None:
            raise AuthenticationError("Sign-in returned no user")
        return user

    def sign_out(self) -> None:
        """End the current session."""
        try:
            self.client.auth.sign_out()
        except Exception as exc:
            raise AuthenticationError(f"Sign-out failed: {exc}") from exc


def _to_session_user(user: object) -> SessionUser | None:
    if user is None:
        return None
    return SessionUser(
        user_id=str(getattr(user, "id", "")),
        email=str(getattr(user, "email", None) or ""),
    )
