"""Tests for the auth service."""

import asyncio

import pytest

from calories_daily.domain.errors import AuthenticationError, ValidationError
from calories_daily.domain.session import SessionMode
from tests.conftest import ALICE


def test_startup_applies_restored_session(auth_service, identity_provider) -> None:
    identity_provider.restored = ALICE

    state = asyncio.run(auth_service.startup())

    assert state.mode == SessionMode.AUTHENTICATED
    assert state.user == ALICE


def test_startup_without_session_is_anonymous(auth_service) -> None:
    state = asyncio.run(auth_service.startup())

    assert state.mode == SessionMode.ANONYMOUS


def test_sign_in_and_out(auth_service, identity_provider) -> None:
    state = asyncio.run(auth_service.sign_in(" alice@example.com ", "secret-alice"))
    assert state.user == ALICE

    state = asyncio.run(auth_service.sign_out())
    assert state.mode == SessionMode.ANONYMOUS
    assert identity_provider.signed_out == 1


def test_sign_in_with_wrong_password(auth_service, session_controller) -> None:
    with pytest.raises(AuthenticationError):
        asyncio.run(auth_service.sign_in("alice@example.com", "nope"))

    assert session_controller.state.mode == SessionMode.ANONYMOUS


@pytest.mark.parametrize(
    ("email", "password"),
    [("", "secret-123"), ("carol@example.com", "12345"), ("   ", "      ")],
)
def test_sign_up_validates_input(
    auth_service, identity_provider, email, password
) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(auth_service.sign_up(email, password))

    assert "carol@example.com" not in identity_provider.users


def test_sign_up_starts_session(auth_service, profile_repository) -> None:
    state = asyncio.run(auth_service.sign_up("carol@example.com", "secret-123"))

    assert state.mode == SessionMode.AUTHENTICATED
    assert state.user.email == "carol@example.com"
    assert profile_repository.created == ["user-carol"]


def test_sign_up_awaiting_confirmation_stays_anonymous(
    auth_service, identity_provider
) -> None:
    identity_provider.require_confirmation = True

    state = asyncio.run(auth_service.sign_up("carol@example.com", "secret-123"))

    assert state.mode == SessionMode.ANONYMOUS
