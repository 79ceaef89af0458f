"""Supabase repository for per-day food logs."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from calories_daily.domain.daylog import DayLog
from calories_daily.domain.documents import (
    day_log_from_document,
    food_to_document,
    totals_to_document,
)
from calories_daily.services.day_log import DayLogRepository


@dataclass
class SupabaseDayLogRepository(DayLogRepository):
    """Supabase implementation for the ``day_logs`` table."""

    client: Client

    def get_day(self, user_id: str, day_id: str) -> DayLog | None:
        """Return the stored log for a user and day."""
        response = (
            self.client.table("day_logs")
            .select("day_id, foods, totals, updated_at")
            .eq("user_id", user_id)
            .eq("day_id", day_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return day_log_from_document(response.data[0], day_id=day_id)

    def save_day(self, user_id: str, log: DayLog) -> None:
        """Upsert the log's foods and totals, keeping other columns."""
        self.client.table("day_logs").upsert(
            {
                "user_id": user_id,
                "day_id": log.day_id,
                "foods": [food_to_document(food) for food in log.foods],
                "totals": totals_to_document(log.totals),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id,day_id",
        ).execute()
