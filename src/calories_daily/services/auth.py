"""Sign-up, sign-in and sign-out flows."""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from calories_daily.domain.errors import ValidationError
from calories_daily.domain.session import SessionState, SessionUser
from calories_daily.services.session_controller import SessionController

MIN_PASSWORD_LENGTH = 6


class IdentityProvider(Protocol):
    """Interface for the external identity provider."""

    def current_user(self) -> SessionUser | None:
        """Return the user of the restored session, if any."""

    def sign_up(self, email: str, password: str) -> SessionUser | None:
        """Register a user; None when the account still needs confirming."""

    def sign_in(self, email: str, password: str) -> SessionUser:
        """Sign in with email and password."""

    def sign_out(self) -> None:
        """End the current session."""


@dataclass
class AuthService:
    """Runs identity actions and feeds the result to the session controller."""

    provider: IdentityProvider
    controller: SessionController

    async def startup(self) -> SessionState:
        """Apply the session the provider restored, if any."""
        user = await asyncio.to_thread(self.provider.current_user)
        return await self.controller.handle(user)

    async def sign_up(self, email: str, password: str) -> SessionState:
        """Create an account and switch to its session when one is issued."""
        email = email.strip()
        if not email or len(password.strip()) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                "Email and a password of at least "
                f"{MIN_PASSWORD_LENGTH} characters are required"
            )
        user = await asyncio.to_thread(self.provider.sign_up, email, password.strip())
        return await self.controller.handle(user)

    async def sign_in(self, email: str, password: str) -> SessionState:
        """Sign in and switch to the user's session."""
        email = email.strip()
        if not email or not password.strip():
            raise ValidationError("Email and password are required")
        user = await asyncio.to_thread(self.provider.sign_in, email, password.strip())
        return await self.controller.handle(user)

    async def sign_out(self) -> SessionState:
        """Sign out; the local cache keeps today's data."""
        await asyncio.to_thread(self.provider.sign_out)
        return await self.controller.handle(None)
