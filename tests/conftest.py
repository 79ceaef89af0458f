"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest

from calories_daily.config import Settings
from calories_daily.containers import AppContainer
from calories_daily.domain.daylog import DayLog
from calories_daily.domain.errors import AuthenticationError
from calories_daily.domain.profile import Profile, ProfileDocument
from calories_daily.domain.session import SessionUser
from calories_daily.services.auth import AuthService, IdentityProvider
from calories_daily.services.catalog import CatalogService
from calories_daily.services.day_log import DayLogReconciler, DayLogRepository
from calories_daily.services.local_cache import InMemoryLocalStore, LocalCache
from calories_daily.services.profile import ProfileManager, ProfileRepository
from calories_daily.services.session_controller import SessionController

FAKE_ANON_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoiYW5vbiIsImlzcyI6InN1cGFiYXNlIn0."
    "c2lnbmF0dXJl"
)

ALICE = SessionUser(user_id="user-alice", email="alice@example.com")
BOB = SessionUser(user_id="user-bob", email="bob@example.com")


@dataclass
class FakeClock:
    """Clock whose date the test moves by hand."""

    today: date = date(2024, 3, 1)

    def __call__(self) -> date:
        return self.today


@dataclass
class InMemoryDayLogRepository(DayLogRepository):
    """In-memory day log store for tests."""

    days: dict[tuple[str, str], DayLog] = field(default_factory=dict)
    writes: list[tuple[str, DayLog]] = field(default_factory=list)
    reads: int = 0
    fail_reads: bool = False
    fail_writes: bool = False

    def get_day(self, user_id: str, day_id: str) -> DayLog | None:
        self.reads += 1
        if self.fail_reads:
            raise RuntimeError("network down")
        return self.days.get((user_id, day_id))

    def save_day(self, user_id: str, log: DayLog) -> None:
        if self.fail_writes:
            raise RuntimeError("network down")
        self.writes.append((user_id, log))
        self.days[(user_id, log.day_id)] = log


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile document store for tests."""

    documents: dict[str, ProfileDocument] = field(default_factory=dict)
    created: list[str] = field(default_factory=list)
    merged: list[tuple[str, Profile]] = field(default_factory=list)
    fail: bool = False

    def get_profile(self, user_id: str) -> ProfileDocument | None:
        if self.fail:
            raise RuntimeError("network down")
        return self.documents.get(user_id)

    def create_profile(self, user_id: str, email: str, profile: Profile) -> None:
        if self.fail:
            raise RuntimeError("network down")
        self.created.append(user_id)
        self.documents[user_id] = ProfileDocument(email=email, profile=profile)

    def merge_profile(self, user_id: str, profile: Profile) -> None:
        if self.fail:
            raise RuntimeError("network down")
        self.merged.append((user_id, profile))
        existing = self.documents.get(user_id)
        email = existing.email if existing else ""
        self.documents[user_id] = ProfileDocument(email=email, profile=profile)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider with a fixed set of accounts."""

    passwords: dict[str, str] = field(default_factory=dict)
    users: dict[str, SessionUser] = field(default_factory=dict)
    restored: SessionUser | None = None
    require_confirmation: bool = False
    signed_out: int = 0

    def add_account(self, user: SessionUser, password: str) -> None:
        self.users[user.email] = user
        self.passwords[user.email] = password

    def current_user(self) -> SessionUser | None:
        return self.restored

    def sign_up(self, email: str, password: str) -> SessionUser | None:
        if email in self.users:
            raise AuthenticationError("User already registered")
        user = SessionUser(user_id=f"user-{email.split('@')[0]}", email=email)
        self.add_account(user, password)
        if self.require_confirmation:
            return None
        self.restored = user
        return user

    def sign_in(self, email: str, password: str) -> SessionUser:
        if self.passwords.get(email) != password:
            raise AuthenticationError("Invalid login credentials")
        self.restored = self.users[email]
        return self.restored

    def sign_out(self) -> None:
        self.signed_out += 1
        self.restored = None


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def local_cache() -> LocalCache:
    return LocalCache(InMemoryLocalStore())


@pytest.fixture
def day_log_repository() -> InMemoryDayLogRepository:
    return InMemoryDayLogRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.add_account(ALICE, "secret-alice")
    provider.add_account(BOB, "secret-bob")
    return provider


@pytest.fixture
def reconciler(
    day_log_repository: InMemoryDayLogRepository,
    local_cache: LocalCache,
    clock: FakeClock,
) -> DayLogReconciler:
    return DayLogReconciler(
        repository=day_log_repository,
        local_cache=local_cache,
        clock=clock,
        retry_attempts=0,
        retry_delay_seconds=0,
    )


@pytest.fixture
def profile_manager(
    profile_repository: InMemoryProfileRepository, local_cache: LocalCache
) -> ProfileManager:
    return ProfileManager(
        repository=profile_repository,
        local_cache=local_cache,
        retry_attempts=0,
        retry_delay_seconds=0,
    )


@pytest.fixture
def session_controller(
    profile_manager: ProfileManager, reconciler: DayLogReconciler
) -> SessionController:
    return SessionController(profile_manager=profile_manager, day_log=reconciler)


@pytest.fixture
def auth_service(
    identity_provider: FakeIdentityProvider, session_controller: SessionController
) -> AuthService:
    return AuthService(identity_provider, session_controller)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key=FAKE_ANON_KEY,
        cache_path=tmp_path / "cache.json",
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    identity_provider: FakeIdentityProvider,
    local_cache: LocalCache,
    reconciler: DayLogReconciler,
    profile_manager: ProfileManager,
    session_controller: SessionController,
    auth_service: AuthService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        identity_provider=identity_provider,
        local_cache=local_cache,
        day_log_reconciler=reconciler,
        profile_manager=profile_manager,
        session_controller=session_controller,
        auth_service=auth_service,
        catalog_service=CatalogService(),
    )
