"""Supabase repository for profile XP and streak fields."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from eye_health_tracker.domain.results import StreakRecord
from eye_health_tracker.services.results import XpRepository
from eye_health_tracker.services.streaks import StreakRepository


@dataclass
class SupabaseProfileRepository(XpRepository, StreakRepository):
    """Supabase implementation backed by the profiles table."""

    client: Client

    def add_xp(self, user_id: UUID, xp_delta: int) -> None:
        """Apply an XP delta through the update_user_xp function."""
        self.client.rpc(
            "update_user_xp",
            {"p_user_id": str(user_id), "p_xp_delta": xp_delta},
        ).execute()

    def get_streak(self, user_id: UUID) -> StreakRecord | None:
        """Return streak fields for a user, if the profile exists."""
        response = (
            self.client.table("profiles")
            .select("current_streak, last_active_week")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return StreakRecord(
            current_streak=int(row.get("current_streak") or 0),
            last_active_week=row.get("last_active_week"),
        )

    def update_streak(
        self, user_id: UUID, current_streak: int, last_active_week: str
    ) -> None:
        """Store new streak fields for a user."""
        self.client.table("profiles").update(
            {
                "current_streak": current_streak,
                "last_active_week": last_active_week,
            }
        ).eq("id", str(user_id)).execute()
