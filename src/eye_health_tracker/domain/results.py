"""Domain models for stored test results and streaks."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class ColorVisionResultRecord:
    """Result payload handed to persistence after a session completes."""

    test_type: str
    score_percent: int
    xp_earned: int
    details: dict[str, object]


@dataclass(frozen=True)
class StoredResult:
    """A persisted test result."""

    id: UUID
    user_id: UUID
    test_type: str
    score: int | None
    xp_earned: int | None
    details: dict[str, object]
    created_at: datetime


@dataclass(frozen=True)
class StreakRecord:
    """Stored weekly streak fields for a user."""

    current_streak: int
    last_active_week: str | None


@dataclass(frozen=True)
class StreakStatus:
    """Derived weekly streak state."""

    effective_streak: int
    should_reset: bool
    last_active_week: str | None
    is_active_this_week: bool
    current_week: str
    next_deadline: datetime
    seconds_until_deadline: int
