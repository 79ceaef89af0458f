"""Supabase repository for profile documents."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calories_daily.domain.documents import profile_from_document, profile_to_document
from calories_daily.domain.profile import Profile, ProfileDocument
from calories_daily.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the ``profiles`` table."""

    client: Client

    def get_profile(self, user_id: str) -> ProfileDocument | None:
        """Return the user's profile document."""
        response = (
            self.client.table("profiles")
            .select("email, profile, created_at, updated_at")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        stored = row.get("profile")
        profile = profile_from_document(stored) if isinstance(stored, dict) else None
        return ProfileDocument(
            email=str(row.get("email") or ""),
            profile=profile,
            created_at=_parse_datetime(row.get("created_at")),
            updated_at=_parse_datetime(row.get("updated_at")),
        )

    def create_profile(self, user_id: str, email: str, profile: Profile) -> None:
        """Insert a profile document for a new user."""
        now = datetime.now(tz=UTC).isoformat()
        self.client.table("profiles").insert(
            {
                "user_id": user_id,
                "email": email,
                "profile": profile_to_document(profile),
                "created_at": now,
                "updated_at": now,
            }
        ).execute()

    def merge_profile(self, user_id: str, profile: Profile) -> None:
        """Upsert the profile, leaving email and created_at untouched."""
        self.client.table("profiles").upsert(
            {
                "user_id": user_id,
                "profile": profile_to_document(profile),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
