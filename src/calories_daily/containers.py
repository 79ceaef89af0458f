"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from calories_daily.adapters.json_file_store import JsonFileLocalStore
from calories_daily.adapters.supabase_day_log_repository import (
    SupabaseDayLogRepository,
)
from calories_daily.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from calories_daily.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calories_daily.config import Settings
from calories_daily.services.auth import AuthService, IdentityProvider
from calories_daily.services.catalog import CatalogService
from calories_daily.services.day_log import DayLogReconciler
from calories_daily.services.local_cache import LocalCache
from calories_daily.services.profile import ProfileManager
from calories_daily.services.session_controller import SessionController


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    local_cache: LocalCache
    day_log_reconciler: DayLogReconciler
    profile_manager: ProfileManager
    session_controller: SessionController
    auth_service: AuthService
    catalog_service: CatalogService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    local_cache = LocalCache(JsonFileLocalStore(resolved_settings.cache_path))
    day_log_reconciler = DayLogReconciler(
        repository=SupabaseDayLogRepository(supabase_client),
        local_cache=local_cache,
        retry_attempts=resolved_settings.remote_read_retries,
        retry_delay_seconds=resolved_settings.remote_retry_delay_seconds,
    )
    profile_manager = ProfileManager(
        repository=SupabaseProfileRepository(supabase_client),
        local_cache=local_cache,
        retry_attempts=resolved_settings.remote_read_retries,
        retry_delay_seconds=resolved_settings.remote_retry_delay_seconds,
    )
    session_controller = SessionController(
        profile_manager=profile_manager,
        day_log=day_log_reconciler,
    )
    identity_provider = SupabaseIdentityProvider(supabase_client)
    return AppContainer(
        settings=resolved_settings,
        identity_provider=identity_provider,
        local_cache=local_cache,
        day_log_reconciler=day_log_reconciler,
        profile_manager=profile_manager,
        session_controller=session_controller,
        auth_service=AuthService(identity_provider, session_controller),
        catalog_service=CatalogService(),
    )
