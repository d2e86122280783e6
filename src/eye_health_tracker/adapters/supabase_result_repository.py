"""Supabase-backed test result repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from eye_health_tracker.domain.results import ColorVisionResultRecord, StoredResult
from eye_health_tracker.services.results import ResultRepository


@dataclass
class SupabaseResultRepository(ResultRepository):
    """Supabase implementation for the test_results table."""

    client: Client

    def create_result(self, user_id: UUID, record: ColorVisionResultRecord) -> UUID:
        """Insert a result row and return its id."""
        response = (
            self.client.table("test_results")
            .insert(
                {
                    "user_id": str(user_id),
                    "test_type": record.test_type,
                    "score": record.score_percent,
                    "xp_earned": record.xp_earned,
                    "details": record.details,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create test result")
        return UUID(response.data[0]["id"])

    def list_recent_results(
        self, user_id: UUID, test_type: str, limit: int
    ) -> list[StoredResult]:
        """Return recent results of a test type, newest first."""
        response = (
            self.client.table("test_results")
            .select("id, user_id, test_type, score, xp_earned, details, created_at")
            .eq("user_id", str(user_id))
            .eq("test_type", test_type)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> StoredResult:
    details = row.get("details")
    return StoredResult(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        test_type=str(row["test_type"]),
        score=int(row["score"]) if row.get("score") is not None else None,
        xp_earned=int(row["xp_earned"]) if row.get("xp_earned") is not None else None,
        details=details if isinstance(details, dict) else {},
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
