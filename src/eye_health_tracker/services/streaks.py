"""Weekly streak bookkeeping for completed tests."""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from eye_health_tracker.domain.results import StreakRecord, StreakStatus

_ISO_WEEK_KEY = re.compile(r"^(\d{4})-W(\d{2})$")
_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MAX_ISO_WEEK = 53
_RESET_AFTER_WEEKS = 2

_logger = logging.getLogger(__name__)


class StreakRepository(Protocol):
    """Persistence interface for weekly streak fields."""

    def get_streak(self, user_id: UUID) -> StreakRecord | None:
        """Return the stored streak fields for a user, if present."""

    def update_streak(
        self, user_id: UUID, current_streak: int, last_active_week: str
    ) -> None:
        """Store new streak fields for a user."""


def week_start(moment: datetime) -> datetime:
    """Return Monday 00:00 UTC of the week containing `moment`."""
    utc = moment.astimezone(UTC)
    start = utc - timedelta(days=utc.weekday())
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def week_key(moment: datetime) -> str:
    """Return the week key (ISO date of the week's Monday)."""
    return week_start(moment).date().isoformat()


def parse_week_key(key: str | None) -> datetime | None:
    """Parse a week key, accepting legacy `YYYY-Www` values."""
    if not key:
        return None
    if _DATE_KEY.match(key):
        try:
            return week_start(datetime.fromisoformat(key).replace(tzinfo=UTC))
        except ValueError:
            return None
    match = _ISO_WEEK_KEY.match(key)
    if match:
        year, week = int(match.group(1)), int(match.group(2))
        if 0 < week <= _MAX_ISO_WEEK:
            try:
                monday = date.fromisocalendar(year, week, 1)
            except ValueError:
                return None
            return datetime(monday.year, monday.month, monday.day, tzinfo=UTC)
    return None


def _weeks_between(later: datetime, earlier: datetime) -> int:
    return (later - earlier).days // 7


@dataclass
class StreakService:
    """Service tracking consecutive active weeks."""

    repository: StreakRepository

    def record_completion(self, user_id: UUID, completed_at: datetime) -> int:
        """Count a completed session towards the weekly streak."""
        record = self.repository.get_streak(user_id) or StreakRecord(
            current_streak=0, last_active_week=None
        )
        current_start = week_start(completed_at)
        last_start = parse_week_key(record.last_active_week)

        if last_start is None:
            new_streak = 1
        else:
            diff_weeks = _weeks_between(current_start, last_start)
            if diff_weeks <= 0:
                return record.current_streak
            if diff_weeks == 1:
                new_streak = max(record.current_streak, 0) + 1
            else:
                new_streak = 1

        self.repository.update_streak(
            user_id,
            current_streak=new_streak,
            last_active_week=week_key(completed_at),
        )
        _logger.info("Streak updated for %s: %s", user_id, new_streak)
        return new_streak

    def get_status(self, user_id: UUID, now: datetime | None = None) -> StreakStatus:
        """Return the effective streak as of `now`."""
        moment = now or datetime.now(tz=UTC)
        record = self.repository.get_streak(user_id) or StreakRecord(
            current_streak=0, last_active_week=None
        )
        current_start = week_start(moment)
        last_start = parse_week_key(record.last_active_week)

        should_reset = False
        is_active_this_week = False
        if last_start is not None:
            diff_weeks = _weeks_between(current_start, last_start)
            if diff_weeks == 0:
                is_active_this_week = True
            elif diff_weeks >= _RESET_AFTER_WEEKS:
                should_reset = record.current_streak != 0
        elif record.current_streak != 0:
            should_reset = True

        next_deadline = current_start + timedelta(days=7)
        return StreakStatus(
            effective_streak=0 if should_reset else record.current_streak,
            should_reset=should_reset,
            last_active_week=(
                last_start.date().isoformat() if last_start is not None else None
            ),
            is_active_this_week=is_active_this_week,
            current_week=current_start.date().isoformat(),
            next_deadline=next_deadline,
            seconds_until_deadline=max(
                0, int((next_deadline - moment).total_seconds())
            ),
        )
